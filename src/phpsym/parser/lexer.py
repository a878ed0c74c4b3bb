# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for PHP source files.

Converts raw source text into the token kinds consumed by the symbol-table
parser. The scanner never raises: unterminated strings and comments run to
the end of the input.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the PHP lexer."""

    # Keywords
    NAMESPACE = "namespace"
    USE = "use"
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    FUNCTION = "function"
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    STATIC = "static"
    ABSTRACT = "abstract"
    FINAL = "final"
    CONST = "const"
    VAR = "var"
    DEFINE = "define"
    NEW = "new"
    AS = "as"
    REQUIRE = "require"
    REQUIRE_ONCE = "require_once"
    INCLUDE = "include"
    INCLUDE_ONCE = "include_once"

    # Symbols
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    SEMICOLON = ";"
    COMMA = ","
    EQUALS = "="
    AMPERSAND = "&"
    QUESTION = "?"
    COLON = ":"
    NS_SEPARATOR = "\\"
    ELLIPSIS = "..."
    OPERATOR = "OPERATOR"
    CHAR = "CHAR"

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Names
    IDENTIFIER = "IDENTIFIER"
    VARIABLE = "VARIABLE"

    # Comments
    BLOCK_COMMENT = "BLOCK_COMMENT"
    LINE_COMMENT = "LINE_COMMENT"

    CLOSE_TAG = "?>"

    # End of file
    EOF = "EOF"


COMMENT_TYPES: frozenset[TokenType] = frozenset({TokenType.BLOCK_COMMENT, TokenType.LINE_COMMENT})


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw source text of the token.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: TokenType
    value: str
    line: int
    column: int

    @property
    def is_comment(self) -> bool:
        return self.type in COMMENT_TYPES

    @property
    def end_line(self) -> int:
        """The line on which the token's text ends."""
        return self.line + self.value.count("\n")

    @property
    def end_column(self) -> int:
        """The column just past the token's last character."""
        last_newline = self.value.rfind("\n")
        if last_newline == -1:
            return self.column + len(self.value)
        return len(self.value) - last_newline


def tokenize(source: str) -> list[Token]:
    """Tokenize PHP source text into a sequence of tokens.

    Text outside ``<?php`` ... ``?>`` is skipped. A source that neither
    starts with markup nor has an open tag at the start of a line is scanned
    as PHP code from the start, which allows parsing snippets such as
    ``$s = '<?xml';``.

    Args:
        source: The full text of a PHP file or snippet.

    Returns:
        A list of Token objects ending with a single EOF token.
    """
    return _Lexer(source).tokenize()


class TokenSource:
    """Pull interface over a token list with exactly one token of push-back."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._can_unget = False

    def next(self) -> Token | None:
        """Return the next token, or None once the end of input is reached."""
        if self._pos >= len(self._tokens) or self._tokens[self._pos].type == TokenType.EOF:
            self._can_unget = False
            return None
        tok = self._tokens[self._pos]
        self._pos += 1
        self._can_unget = True
        return tok

    def unget(self) -> None:
        """Un-consume the most recently returned token."""
        if not self._can_unget:
            raise RuntimeError("Only the most recently read token can be pushed back")
        self._pos -= 1
        self._can_unget = False


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "namespace": TokenType.NAMESPACE,
    "use": TokenType.USE,
    "class": TokenType.CLASS,
    "interface": TokenType.INTERFACE,
    "trait": TokenType.TRAIT,
    "extends": TokenType.EXTENDS,
    "implements": TokenType.IMPLEMENTS,
    "function": TokenType.FUNCTION,
    "public": TokenType.PUBLIC,
    "private": TokenType.PRIVATE,
    "protected": TokenType.PROTECTED,
    "static": TokenType.STATIC,
    "abstract": TokenType.ABSTRACT,
    "final": TokenType.FINAL,
    "const": TokenType.CONST,
    "var": TokenType.VAR,
    "define": TokenType.DEFINE,
    "new": TokenType.NEW,
    "as": TokenType.AS,
    "require": TokenType.REQUIRE,
    "require_once": TokenType.REQUIRE_ONCE,
    "include": TokenType.INCLUDE,
    "include_once": TokenType.INCLUDE_ONCE,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "&": TokenType.AMPERSAND,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    "\\": TokenType.NS_SEPARATOR,
}

# Longest operators first so that the scan is greedy.
_OPERATORS: tuple[str, ...] = (
    "<<=",
    ">>=",
    "**=",
    "===",
    "!==",
    "<=>",
    "??=",
    "?->",
    "==",
    "!=",
    "<>",
    "<=",
    ">=",
    "=>",
    "->",
    "::",
    "&&",
    "||",
    "??",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    ".=",
    "%=",
    "&=",
    "|=",
    "^=",
    "**",
    "<<",
    ">>",
)

_MEMBER_ACCESS: frozenset[str] = frozenset({"->", "?->", "::"})

def _is_template(source: str) -> bool:
    """True when the source opens with markup or has an open tag at the start of a line."""
    stripped = source.lstrip()
    if len(stripped) > 1 and stripped[0] == "<" and (stripped[1].isalpha() or stripped[1] in "/!?"):
        return True
    start = source.find("<?")
    return start != -1 and (start == 0 or source[start - 1] == "\n")


def _is_name_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_" or ord(ch) >= 0x80


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_" or ord(ch) >= 0x80


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        in_php = not _is_template(self._source)
        while self._pos < len(self._source):
            if not in_php:
                in_php = self._skip_inline_html()
                continue
            self._skip_whitespace()
            if self._pos >= len(self._source):
                break
            if self._source.startswith("?>", self._pos):
                self._emit_fixed(TokenType.CLOSE_TAG, "?>")
                in_php = False
                continue
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' at end of input."""
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _advance_by(self, count: int) -> str:
        """Consume *count* characters (bounded by the input) and return them."""
        start = self._pos
        for _ in range(count):
            if self._pos >= len(self._source):
                break
            self._advance()
        return self._source[start : self._pos]

    def _emit_fixed(self, token_type: TokenType, text: str) -> None:
        line, col = self._line, self._column
        self._advance_by(len(text))
        self._tokens.append(Token(token_type, text, line, col))

    # ------------------------------------------------------------------
    # Inline HTML and whitespace
    # ------------------------------------------------------------------

    def _skip_inline_html(self) -> bool:
        """Skip text up to and including the next open tag.

        Returns True when an open tag was found.
        """
        start = self._source.find("<?", self._pos)
        if start == -1:
            self._advance_by(len(self._source) - self._pos)
            return False
        self._advance_by(start - self._pos)
        if self._source[self._pos : self._pos + 5].lower() == "<?php":
            self._advance_by(5)
        elif self._source.startswith("<?=", self._pos):
            self._advance_by(3)
        else:
            self._advance_by(2)
        return True

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._source) and self._current() in " \t\r\n\f\v":
            self._advance()

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        line = self._line
        col = self._column

        if ch == "/" and self._peek() == "*":
            self._scan_block_comment(line, col)
        elif (ch == "/" and self._peek() == "/") or (ch == "#" and self._peek() != "["):
            self._scan_line_comment(line, col)
        elif ch == "$" and _is_name_start(self._peek() or " "):
            self._advance()  # $
            self._tokens.append(Token(TokenType.VARIABLE, "$" + self._read_name(), line, col))
        elif ch in "'\"`":
            self._scan_quoted(ch, line, col)
        elif self._source.startswith("<<<", self._pos):
            self._scan_heredoc(line, col)
        elif ch.isdigit() or (ch == "." and self._peek().isdigit()):
            self._scan_number(line, col)
        elif _is_name_start(ch):
            value = self._read_name()
            token_type = _KEYWORDS.get(value.lower(), TokenType.IDENTIFIER)
            if self._tokens and self._tokens[-1].value in _MEMBER_ACCESS:
                # Member names such as '$obj->class' or 'Foo::class' are never keywords.
                token_type = TokenType.IDENTIFIER
            self._tokens.append(Token(token_type, value, line, col))
        elif self._source.startswith("...", self._pos):
            self._emit_fixed(TokenType.ELLIPSIS, "...")
        else:
            for op in _OPERATORS:
                if self._source.startswith(op, self._pos):
                    self._emit_fixed(TokenType.OPERATOR, op)
                    return
            self._advance()
            self._tokens.append(Token(_SINGLE_CHAR_TOKENS.get(ch, TokenType.CHAR), ch, line, col))

    def _read_name(self) -> str:
        start = self._pos
        while self._pos < len(self._source) and _is_name_char(self._current()):
            self._advance()
        return self._source[start : self._pos]

    # ------------------------------------------------------------------
    # Comment scanners
    # ------------------------------------------------------------------

    def _scan_block_comment(self, line: int, col: int) -> None:
        """Scan from '/*' through the matching '*/' (or end of input)."""
        start = self._pos
        end = self._source.find("*/", self._pos + 2)
        end = len(self._source) if end == -1 else end + 2
        self._advance_by(end - start)
        self._tokens.append(Token(TokenType.BLOCK_COMMENT, self._source[start : self._pos], line, col))

    def _scan_line_comment(self, line: int, col: int) -> None:
        """Scan a '//' or '#' comment up to the newline or a closing '?>'."""
        start = self._pos
        while self._pos < len(self._source) and self._current() != "\n":
            if self._source.startswith("?>", self._pos):
                break
            self._advance()
        self._tokens.append(Token(TokenType.LINE_COMMENT, self._source[start : self._pos], line, col))

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_quoted(self, quote: str, line: int, col: int) -> None:
        """Scan a quoted literal, keeping the quotes and escapes verbatim."""
        start = self._pos
        self._advance()  # opening quote
        while self._pos < len(self._source):
            ch = self._advance()
            if ch == "\\" and self._pos < len(self._source):
                self._advance()
            elif ch == quote:
                break
        self._tokens.append(Token(TokenType.STRING, self._source[start : self._pos], line, col))

    def _scan_heredoc(self, line: int, col: int) -> None:
        """Scan a heredoc or nowdoc literal up to its closing label."""
        start = self._pos
        self._advance_by(3)  # <<<
        while self._pos < len(self._source) and self._current() in " \t":
            self._advance()
        quote = self._current() if self._current() and self._current() in "'\"" else ""
        if quote:
            self._advance()
        label = self._read_name()
        if not label:
            # A lone '<<<' is not a heredoc; emit it as an operator-like run.
            self._tokens.append(Token(TokenType.OPERATOR, self._source[start : self._pos], line, col))
            return
        if quote and self._current() == quote:
            self._advance()
        while self._pos < len(self._source):
            ch = self._advance()
            if ch != "\n":
                continue
            while self._pos < len(self._source) and self._current() in " \t":
                self._advance()
            if self._source.startswith(label, self._pos) and not _is_name_char(self._peek(len(label)) or " "):
                self._advance_by(len(label))
                break
        self._tokens.append(Token(TokenType.STRING, self._source[start : self._pos], line, col))

    def _scan_number(self, line: int, col: int) -> None:
        """Scan an integer or floating-point literal (hex, binary, exponents included)."""
        start = self._pos
        while self._pos < len(self._source):
            ch = self._current()
            if _is_name_char(ch) or ch == ".":
                self._advance()
            elif ch in "+-" and self._source[self._pos - 1] in "eE" and not self._source[start:].startswith("0x"):
                self._advance()
            else:
                break
        self._tokens.append(Token(TokenType.NUMBER, self._source[start : self._pos], line, col))
