# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the PHP lexical scanner and the push-back token source."""

import pytest

from phpsym.parser.lexer import Token, TokenSource, TokenType, tokenize

# ###############
# Test Helpers
# ###############


def _tokens_no_eof(source: str) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = tokenize(source)
    assert result[-1].type == TokenType.EOF
    return result[:-1]


def _types(source: str) -> list[TokenType]:
    """Return the token types for all tokens except EOF."""
    return [tok.type for tok in _tokens_no_eof(source)]


def _values(source: str) -> list[str]:
    """Return the token values for all tokens except EOF."""
    return [tok.value for tok in _tokens_no_eof(source)]


# ###############
# EOF Handling
# ###############


class TestEof:
    def test_empty_string_produces_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only_produces_eof(self) -> None:
        assert _types("   \t\n  ") == []

    def test_open_tag_only_produces_eof(self) -> None:
        assert _types("<?php\n") == []


# ###############
# Open and Close Tags
# ###############


class TestTags:
    def test_inline_html_is_skipped(self) -> None:
        assert _values("<html><?php $a; ?></html>") == ["$a", ";", "?>"]

    def test_code_after_close_tag_requires_new_open_tag(self) -> None:
        assert _values("<?php $a ?> text $b <?php $c") == ["$a", "?>", "$c"]

    def test_short_echo_tag(self) -> None:
        assert _values("<p><?= $title ?></p>") == ["$title", "?>"]

    def test_snippet_without_open_tag_is_code(self) -> None:
        assert _types("class A {}") == [
            TokenType.CLASS,
            TokenType.IDENTIFIER,
            TokenType.LBRACE,
            TokenType.RBRACE,
        ]

    def test_open_tag_inside_string_of_snippet(self) -> None:
        assert _values("$s = '<?xml';") == ["$s", "=", "'<?xml'", ";"]

    def test_text_before_open_tag_line_is_skipped(self) -> None:
        assert _values("Title\n<?php $a;") == ["$a", ";"]


# ###############
# Keywords and Names
# ###############


class TestKeywords:
    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("namespace", TokenType.NAMESPACE),
            ("use", TokenType.USE),
            ("class", TokenType.CLASS),
            ("interface", TokenType.INTERFACE),
            ("trait", TokenType.TRAIT),
            ("extends", TokenType.EXTENDS),
            ("implements", TokenType.IMPLEMENTS),
            ("function", TokenType.FUNCTION),
            ("public", TokenType.PUBLIC),
            ("private", TokenType.PRIVATE),
            ("protected", TokenType.PROTECTED),
            ("static", TokenType.STATIC),
            ("abstract", TokenType.ABSTRACT),
            ("final", TokenType.FINAL),
            ("const", TokenType.CONST),
            ("define", TokenType.DEFINE),
            ("new", TokenType.NEW),
            ("as", TokenType.AS),
            ("require_once", TokenType.REQUIRE_ONCE),
            ("include", TokenType.INCLUDE),
        ],
    )
    def test_keyword_recognized(self, source: str, expected_type: TokenType) -> None:
        assert _types(source) == [expected_type]

    def test_keywords_are_case_insensitive(self) -> None:
        tokens = _tokens_no_eof("CLASS Function")
        assert [tok.type for tok in tokens] == [TokenType.CLASS, TokenType.FUNCTION]
        assert [tok.value for tok in tokens] == ["CLASS", "Function"]

    def test_keyword_prefix_is_identifier(self) -> None:
        assert _types("classes") == [TokenType.IDENTIFIER]

    def test_member_name_after_arrow_is_identifier(self) -> None:
        assert _types("$obj->class") == [TokenType.VARIABLE, TokenType.OPERATOR, TokenType.IDENTIFIER]

    def test_class_constant_after_double_colon_is_identifier(self) -> None:
        assert _types("Foo::class") == [TokenType.IDENTIFIER, TokenType.OPERATOR, TokenType.IDENTIFIER]

    def test_variable(self) -> None:
        tokens = _tokens_no_eof("$name_1")
        assert tokens[0].type == TokenType.VARIABLE
        assert tokens[0].value == "$name_1"

    def test_qualified_name_is_split_on_separator(self) -> None:
        assert _types("\\Foo\\Bar") == [
            TokenType.NS_SEPARATOR,
            TokenType.IDENTIFIER,
            TokenType.NS_SEPARATOR,
            TokenType.IDENTIFIER,
        ]


# ###############
# Operators and Punctuation
# ###############


class TestOperators:
    def test_single_equals(self) -> None:
        assert _types("=") == [TokenType.EQUALS]

    @pytest.mark.parametrize("op", ["==", "===", "!=", "=>", "->", "::", "<=>", "??=", ".=", "+="])
    def test_multi_char_operator_is_not_equals(self, op: str) -> None:
        tokens = _tokens_no_eof(op)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.OPERATOR
        assert tokens[0].value == op

    def test_ellipsis(self) -> None:
        assert _types("...$args") == [TokenType.ELLIPSIS, TokenType.VARIABLE]

    def test_punctuation(self) -> None:
        assert _types("(){};,&?:") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.SEMICOLON,
            TokenType.COMMA,
            TokenType.AMPERSAND,
            TokenType.QUESTION,
            TokenType.COLON,
        ]

    def test_other_characters_are_char_tokens(self) -> None:
        assert _values("[1+2]") == ["[", "1", "+", "2", "]"]
        assert _types("+")[0] == TokenType.CHAR


# ###############
# Literals
# ###############


class TestLiterals:
    def test_single_quoted_string_keeps_quotes(self) -> None:
        assert _values("'FOO'") == ["'FOO'"]

    def test_double_quoted_string_with_escaped_quote(self) -> None:
        tokens = _tokens_no_eof('"a\\"b" ;')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == '"a\\"b"'
        assert tokens[1].type == TokenType.SEMICOLON

    def test_unterminated_string_runs_to_end(self) -> None:
        tokens = _tokens_no_eof("'abc; $x")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.STRING

    def test_heredoc_is_one_string(self) -> None:
        source = "$a = <<<EOT\nline { one\nEOT;\n$b"
        assert _types(source) == [
            TokenType.VARIABLE,
            TokenType.EQUALS,
            TokenType.STRING,
            TokenType.SEMICOLON,
            TokenType.VARIABLE,
        ]

    def test_nowdoc_is_one_string(self) -> None:
        source = "<<<'EOT'\n$notavar\n  EOT;"
        assert _types(source) == [TokenType.STRING, TokenType.SEMICOLON]

    @pytest.mark.parametrize("number", ["42", "3.14", "0x1F", "1e10", "1.5e-3"])
    def test_numbers(self, number: str) -> None:
        assert _tokens_no_eof(number) == [Token(TokenType.NUMBER, number, 1, 1)]


# ###############
# Comments
# ###############


class TestComments:
    def test_block_comment(self) -> None:
        tokens = _tokens_no_eof("/** doc */ $a")
        assert tokens[0].type == TokenType.BLOCK_COMMENT
        assert tokens[0].value == "/** doc */"
        assert tokens[0].is_comment

    def test_line_comments(self) -> None:
        assert _types("// one\n# two\n$a") == [
            TokenType.LINE_COMMENT,
            TokenType.LINE_COMMENT,
            TokenType.VARIABLE,
        ]

    def test_hash_bracket_is_not_a_comment(self) -> None:
        assert _values("#[Attr]") == ["#", "[", "Attr", "]"]

    def test_block_comment_end_line(self) -> None:
        tokens = _tokens_no_eof("/**\n * doc\n */")
        assert tokens[0].line == 1
        assert tokens[0].end_line == 3

    def test_unterminated_block_comment_runs_to_end(self) -> None:
        tokens = _tokens_no_eof("/* open $a")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.BLOCK_COMMENT


# ###############
# Source Locations
# ###############


class TestLocations:
    def test_line_and_column(self) -> None:
        tokens = _tokens_no_eof("$a;\n  class")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[2].line, tokens[2].column) == (2, 3)

    def test_lines_counted_inside_inline_html(self) -> None:
        tokens = _tokens_no_eof("<p>\n</p>\n<?php $a")
        assert tokens[0].line == 3

    def test_end_column(self) -> None:
        single, multi = _tokens_no_eof("/** a */ /*\n  x */")
        assert single.end_column == 9
        assert (multi.end_line, multi.end_column) == (2, 7)


# ###############
# Token Source
# ###############


class TestTokenSource:
    def test_next_returns_tokens_then_none(self) -> None:
        source = TokenSource(tokenize("$a;"))
        assert source.next().value == "$a"
        assert source.next().value == ";"
        assert source.next() is None
        assert source.next() is None

    def test_unget_returns_same_token_again(self) -> None:
        source = TokenSource(tokenize("$a $b"))
        first = source.next()
        source.unget()
        assert source.next() is first

    def test_only_one_token_can_be_pushed_back(self) -> None:
        source = TokenSource(tokenize("$a $b"))
        source.next()
        source.next()
        source.unget()
        with pytest.raises(RuntimeError):
            source.unget()

    def test_unget_after_end_of_input_is_rejected(self) -> None:
        source = TokenSource(tokenize(""))
        assert source.next() is None
        with pytest.raises(RuntimeError):
            source.unget()
