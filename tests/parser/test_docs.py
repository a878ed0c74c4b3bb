# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for doc-comment parsing and association."""

from phpsym.model.entities import Function, Namespace, Variable
from phpsym.model.flags import VariableFlag
from phpsym.parser.docs import DocComment, associate_comments
from phpsym.parser.lexer import Token, TokenType
from phpsym.parser.resolver import NameResolver

# ###############
# Doc Comment Parsing
# ###############

_SEND_DOC = """/**
 * Sends a message.
 *
 * @param string $to Recipient.
 * @param int|null $retries
 * @return ?Receipt
 */"""


class TestDocComment:
    def test_summary_and_tags(self) -> None:
        doc = DocComment.parse(_SEND_DOC)
        assert doc.summary == "Sends a message."
        assert doc.params == {"$to": "string", "$retries": "int"}
        assert doc.return_type == "Receipt"
        assert doc.var_type == ""

    def test_single_line_var(self) -> None:
        assert DocComment.parse("/** @var Foo\\Bar */").var_type == "Foo\\Bar"

    def test_null_first_in_union(self) -> None:
        assert DocComment.parse("/** @var null|Foo */").var_type == "Foo"

    def test_param_name_before_type(self) -> None:
        assert DocComment.parse("/** @param $x Foo */").params == {"$x": "Foo"}

    def test_reference_and_variadic_params(self) -> None:
        doc = DocComment.parse("/**\n * @param array &$items\n * @param string ...$rest\n */")
        assert doc.params == {"$items": "array", "$rest": "string"}

    def test_tag_without_value(self) -> None:
        doc = DocComment.parse("/** @return */")
        assert doc.return_type == ""

    def test_plain_comment(self) -> None:
        doc = DocComment.parse("/* just text */")
        assert doc.summary == "just text"
        assert doc.params == {}


# ###############
# Association
# ###############


def _block(text: str, line: int) -> Token:
    return Token(TokenType.BLOCK_COMMENT, text, line, 1)


class TestAssociateComments:
    def test_filename_is_backfilled(self) -> None:
        root = Namespace(full_name="\\")
        var = Variable(full_name="$x", line=1)
        root.add_child(var)
        define = Variable(full_name="\\X", line=2, flags=VariableFlag.DEFINE)
        associate_comments(root, [define], [], NameResolver(), "a.php")
        assert root.filename == "a.php"
        assert var.filename == "a.php"
        assert define.filename == "a.php"

    def test_existing_filename_is_kept(self) -> None:
        root = Namespace(full_name="\\", filename="b.php")
        associate_comments(root, [], [], NameResolver(), "a.php")
        assert root.filename == "b.php"

    def test_multi_line_comment_matches_by_end_line(self) -> None:
        root = Namespace(full_name="\\App")
        func = Function(full_name="send", line=8)
        root.add_child(func)
        param = Variable(full_name="$to", line=8, flags=VariableFlag.FUNCTION_ARG)
        func.add_child(param)

        associate_comments(root, [], [_block(_SEND_DOC, 1)], NameResolver("\\App"), "")
        assert func.doc_comment == _SEND_DOC
        assert func.return_type == "\\App\\Receipt"
        assert param.type_hint == "string"
        assert param.doc_comment == ""

    def test_define_gets_doc(self) -> None:
        define = Variable(full_name="\\DEBUG", line=3, flags=VariableFlag.DEFINE)
        associate_comments(Namespace(full_name="\\"), [define], [_block("/** @var bool */", 2)], NameResolver(), "")
        assert define.doc_comment == "/** @var bool */"
        assert define.type_hint == "bool"

    def test_entity_without_line_is_skipped(self) -> None:
        root = Namespace(full_name="\\")
        var = Variable(full_name="$x")
        root.add_child(var)
        associate_comments(root, [], [_block("/** @var int */", 0)], NameResolver(), "")
        assert var.doc_comment == ""

    def test_comment_after_entity_on_same_line_is_ignored(self) -> None:
        root = Namespace(full_name="\\")
        first = Function(full_name="a", line=2, column=10)
        second = Function(full_name="b", line=3, column=10)
        root.add_child(first)
        root.add_child(second)
        trailing = Token(TokenType.BLOCK_COMMENT, "/** @return Foo */", 2, 17)

        associate_comments(root, [], [trailing], NameResolver(), "")
        assert first.doc_comment == ""
        assert second.doc_comment == "/** @return Foo */"
        assert second.return_type == "\\Foo"

    def test_comment_before_entity_on_same_line(self) -> None:
        root = Namespace(full_name="\\")
        var = Variable(full_name="$count", line=1, column=17)
        root.add_child(var)
        associate_comments(root, [], [_block("/** @var int */", 1)], NameResolver(), "")
        assert var.type_hint == "int"
