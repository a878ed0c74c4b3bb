# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Single-pass symbol-table parser for PHP source files.

Converts the token stream of one file into an entity tree of namespaces,
classes, functions and variables. The parser never raises on bad input:
every sub-parser recovers by abandoning the construct it was reading, and
sub-parsers that return a boolean only tell the caller whether the end of
input was reached.

The scope stack mirrors brace depth. A class body is parsed by a recursive
call of the statement loop that returns once the closing brace brings the
depth back to the value it had before the opening brace.
"""

from __future__ import annotations

from pathlib import Path

from phpsym.model.entities import (
    NS_SEPARATOR,
    AnyEntity,
    Class,
    Function,
    Namespace,
    ParseResult,
    Variable,
)
from phpsym.model.flags import FunctionFlag, VariableFlag
from phpsym.parser.docs import associate_comments
from phpsym.parser.lexer import Token, TokenSource, TokenType, tokenize
from phpsym.parser.lookback import LookBackBuffer
from phpsym.parser.resolver import NameResolver

# ###############
# Public Interface
# ###############


def parse(source: str, filename: str = "", *, parse_function_bodies: bool = False) -> ParseResult:
    """Parse PHP source text into its per-file symbol table.

    Args:
        source: The full text of a PHP file (or a snippet without ``<?php``).
        filename: Recorded on every entity; empty for in-memory sources.
        parse_function_bodies: Also record local variables declared inside
            function bodies. When False, bodies are skipped by brace depth.

    Returns:
        The entity tree together with the file's ``define()`` constants,
        alias table and comments. Malformed input yields a partial tree.
    """
    tokens = tokenize(source)
    return _Parser(tokens, filename, parse_function_bodies).parse()


def parse_file(path: Path, *, parse_function_bodies: bool = False) -> ParseResult:
    """Read and parse a PHP file, recording its absolute path on every entity.

    Raises:
        OSError: If the file cannot be read.
    """
    path = Path(path).resolve()
    source = path.read_text(encoding="utf-8", errors="replace")
    return parse(source, str(path), parse_function_bodies=parse_function_bodies)


# ################
# Implementation
# ################

_VISIBILITY: frozenset[TokenType] = frozenset(
    {
        TokenType.PUBLIC,
        TokenType.PRIVATE,
        TokenType.PROTECTED,
        TokenType.VAR,
    }
)

_INCLUDES: frozenset[TokenType] = frozenset(
    {
        TokenType.REQUIRE,
        TokenType.REQUIRE_ONCE,
        TokenType.INCLUDE,
        TokenType.INCLUDE_ONCE,
    }
)

_CLASS_KEYWORDS: frozenset[TokenType] = frozenset({TokenType.CLASS, TokenType.INTERFACE, TokenType.TRAIT})

_NAME_TOKENS: frozenset[TokenType] = frozenset({TokenType.IDENTIFIER, TokenType.NS_SEPARATOR})

# Markers that may precede a parameter but are not part of its type hint.
_SIGNATURE_SKIP: frozenset[TokenType] = frozenset(
    {
        TokenType.QUESTION,
        TokenType.ELLIPSIS,
        TokenType.PUBLIC,
        TokenType.PRIVATE,
        TokenType.PROTECTED,
    }
)

_CLOSURE_NAME = "{closure}"


class _Parser:
    """Parser context for one file: token source, scope stack, alias table.

    All mutable state lives here and is discarded with the parser, so files
    can be parsed independently of each other.
    """

    def __init__(self, tokens: list[Token], filename: str, parse_function_bodies: bool) -> None:
        self._source = TokenSource(tokens)
        self._filename = filename
        self._parse_function_bodies = parse_function_bodies
        self._depth = 0
        self._depth_delta = 0
        self._reached_eof = False
        self._scopes: list[AnyEntity] = []
        self._lookback = LookBackBuffer()
        self._resolver = NameResolver()
        self._comments: list[Token] = []
        self._defines: list[Variable] = []

    def parse(self) -> ParseResult:
        """Run the statement loop over the whole file, then attach doc comments."""
        self._parse(exit_depth=-1)
        root = self._namespace()
        associate_comments(root, self._defines, self._comments, self._resolver, self._filename)
        return ParseResult(
            filename=self._filename,
            namespace=root,
            defines=self._defines,
            aliases=dict(self._resolver.aliases),
            comments=[comment.value for comment in self._comments],
        )

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _next_token(self) -> Token | None:
        """Return the next non-comment token, tracking depth and look-back.

        Comments are moved to the comment pool. Returns None at end of input.
        """
        while True:
            tok = self._source.next()
            if tok is None:
                self._reached_eof = True
                return None
            if not tok.is_comment:
                break
            self._comments.append(tok)

        self._depth_delta = 0
        if tok.type == TokenType.LBRACE:
            self._depth_delta = 1
        elif tok.type == TokenType.RBRACE and self._depth > 0:
            self._depth_delta = -1
        elif tok.type == TokenType.SEMICOLON:
            self._lookback.clear()
        self._depth += self._depth_delta
        self._lookback.append(tok)
        return tok

    def _unget_token(self, tok: Token) -> None:
        """Push back the token just read, undoing its depth and look-back effects."""
        self._source.unget()
        self._depth -= self._depth_delta
        self._depth_delta = 0
        self._lookback.pop(tok)

    def _read_until(self, *types: TokenType) -> Token | None:
        """Consume tokens until one of *types* is read and return it (None at EOF)."""
        while (tok := self._next_token()) is not None:
            if tok.type in types:
                return tok
        return None

    def _consume_until(self, token_type: TokenType) -> bool:
        return self._read_until(token_type) is not None

    # ------------------------------------------------------------------
    # Scope helpers
    # ------------------------------------------------------------------

    def _current_scope(self) -> AnyEntity:
        """Return the innermost open scope, opening the global namespace if needed."""
        if not self._scopes:
            self._scopes.append(Namespace(full_name=NS_SEPARATOR, filename=self._filename))
        return self._scopes[-1]

    def _namespace(self) -> Namespace:
        root = self._scopes[0] if self._scopes else self._current_scope()
        assert isinstance(root, Namespace)
        return root

    def _resolve(self, name: str) -> str:
        return self._resolver.make_absolute(name)

    # ------------------------------------------------------------------
    # Statement loop
    # ------------------------------------------------------------------

    def _parse(self, exit_depth: int) -> None:
        """Dispatch statements until a '}' brings the depth to *exit_depth* or input ends."""
        while (tok := self._next_token()) is not None:
            if tok.type in (TokenType.EQUALS, TokenType.LBRACE, TokenType.SEMICOLON):
                self._lookback.clear()
            elif tok.type == TokenType.RBRACE:
                self._lookback.clear()
                if self._depth == exit_depth:
                    return
            elif tok.type == TokenType.VARIABLE:
                if not isinstance(self._current_scope(), Class):
                    self._on_variable(tok)
            elif tok.type in _VISIBILITY:
                if isinstance(self._current_scope(), Class) and not self._on_member():
                    return
            elif tok.type == TokenType.DEFINE:
                self._on_define(tok)
            elif tok.type == TokenType.CONST:
                if not self._on_const(VariableFlag.MEMBER | VariableFlag.CONST):
                    return
            elif tok.type in _INCLUDES:
                self._lookback.clear()
            elif tok.type == TokenType.USE:
                if isinstance(self._current_scope(), Class):
                    self._on_use_trait()
                else:
                    self._on_use()
                self._lookback.clear()
            elif tok.type in _CLASS_KEYWORDS:
                self._on_class(tok)
                self._lookback.clear()
            elif tok.type == TokenType.NAMESPACE:
                self._on_namespace(tok)
                self._lookback.clear()
            elif tok.type == TokenType.FUNCTION:
                self._on_function()
                self._lookback.clear()

    # ------------------------------------------------------------------
    # Namespaces and aliases
    # ------------------------------------------------------------------

    def _on_namespace(self, keyword: Token) -> None:
        """Parse: namespace A\\B;  (or the braced form 'namespace A\\B {')"""
        parts: list[str] = []
        while (tok := self._next_token()) is not None:
            if tok.type == TokenType.SEMICOLON:
                break
            if tok.type == TokenType.LBRACE:
                self._unget_token(tok)
                break
            if not parts and tok.type != TokenType.NS_SEPARATOR:
                parts.append(NS_SEPARATOR)
            parts.append(tok.value)

        if self._scopes:
            # Only the first namespace statement of a file opens a scope.
            return
        path = "".join(parts) or NS_SEPARATOR
        namespace = Namespace(full_name=path, line=keyword.line, column=keyword.column, filename=self._filename)
        self._scopes.append(namespace)
        self._resolver.namespace = path

    def _on_use(self) -> None:
        """Parse: use A\\B [as C] [, D\\E [as F]]* ;  (group form 'use A\\{B, C};' too)"""
        prefix = full_name = alias = temp = ""
        while (tok := self._next_token()) is not None:
            if tok.type in (TokenType.COMMA, TokenType.SEMICOLON):
                if not full_name:
                    full_name, temp = temp, ""
                elif not alias:
                    alias, temp = temp, ""
                if full_name:
                    self._resolver.add_alias(prefix + full_name, alias)
                full_name = alias = temp = ""
                if tok.type == TokenType.SEMICOLON:
                    return
            elif tok.type == TokenType.AS:
                full_name, temp = temp, ""
            elif tok.type == TokenType.LBRACE:
                prefix, temp = temp, ""
            elif tok.type == TokenType.RBRACE:
                continue
            elif tok.type in (TokenType.FUNCTION, TokenType.CONST) and not temp:
                # 'use function' / 'use const' import into the same table.
                continue
            else:
                temp += tok.value

    # ------------------------------------------------------------------
    # Classes, interfaces and traits
    # ------------------------------------------------------------------

    def _on_class(self, keyword: Token) -> None:
        """Parse: class <Name> [extends <Base>] [implements <I1>, <I2>] { ... }"""
        tok = self._next_token()
        if tok is None:
            return
        if tok.type != TokenType.IDENTIFIER:
            # Anonymous class or a stray keyword; leave the token to the caller.
            self._unget_token(tok)
            return

        klass = Class(
            full_name=self._resolve(tok.value),
            line=tok.line,
            column=tok.column,
            filename=self._filename,
            is_interface=keyword.type == TokenType.INTERFACE,
            is_trait=keyword.type == TokenType.TRAIT,
        )
        while (tok := self._next_token()) is not None:
            if tok.type == TokenType.EXTENDS:
                base = self._read_qualified_name()
                if base is None:
                    return
                klass.extends = self._resolve(base)
            elif tok.type == TokenType.IMPLEMENTS:
                interfaces = self._read_comma_separated_names(TokenType.LBRACE)
                if interfaces is None:
                    return
                for name in interfaces:
                    klass.add_implements(name)
            elif tok.type == TokenType.LBRACE:
                self._current_scope().add_child(klass)
                self._scopes.append(klass)
                self._lookback.clear()
                self._parse(self._depth - 1)
                if not self._reached_eof:
                    self._scopes.pop()
                return

    def _read_qualified_name(self) -> str | None:
        """Read the next (possibly qualified) name; the terminator is pushed back.

        Returns None when the input ends before a name starts.
        """
        parts: list[str] = []
        while (tok := self._next_token()) is not None:
            if tok.type in _NAME_TOKENS:
                parts.append(tok.value)
            elif parts or tok.type == TokenType.LBRACE:
                self._unget_token(tok)
                return "".join(parts)
        return "".join(parts) if parts else None

    def _read_comma_separated_names(self, delim: TokenType) -> list[str] | None:
        """Read resolved names up to *delim*, which is pushed back.

        Duplicates are dropped. Returns None if the input ends first.
        """
        names: list[str] = []
        temp = ""
        while (tok := self._next_token()) is not None:
            if tok.type == delim or tok.type == TokenType.COMMA:
                name = self._resolve(temp)
                if name and name not in names:
                    names.append(name)
                temp = ""
                if tok.type == delim:
                    self._unget_token(tok)
                    return names
            else:
                temp += tok.value
        return None

    def _on_use_trait(self) -> None:
        """Parse: use TraitA, TraitB;  inside a class body."""
        klass = self._current_scope()
        assert isinstance(klass, Class)
        temp = ""
        while (tok := self._next_token()) is not None:
            if tok.type in (TokenType.COMMA, TokenType.SEMICOLON, TokenType.LBRACE):
                if temp:
                    klass.traits.append(self._resolve(temp))
                temp = ""
                if tok.type == TokenType.SEMICOLON:
                    return
                if tok.type == TokenType.LBRACE:
                    # Conflict resolution block: 'use A, B { A::x insteadof B; }'
                    self._skip_block()
                    return
            else:
                temp += tok.value

    def _skip_block(self) -> bool:
        """Consume tokens up to the '}' closing the block just opened."""
        depth = self._depth
        while (tok := self._next_token()) is not None:
            if tok.type == TokenType.RBRACE and self._depth < depth:
                return True
        return False

    # ------------------------------------------------------------------
    # Members, constants and defines
    # ------------------------------------------------------------------

    def _on_member(self) -> bool:
        """Handle a visibility keyword inside a class body.

        The keyword may start a property, a method, or a constant; scan
        forward until the token that decides it.
        """
        tok = self._read_until(TokenType.VARIABLE, TokenType.FUNCTION, TokenType.CONST)
        if tok is None:
            return False
        if tok.type == TokenType.FUNCTION:
            self._on_function()
            self._lookback.clear()
            return True
        if tok.type == TokenType.CONST:
            return self._on_const(self._lookback.variable_flags() | VariableFlag.MEMBER)

        member = Variable(
            full_name=tok.value,
            line=tok.line,
            column=tok.column,
            filename=self._filename,
            flags=self._lookback.variable_flags() | VariableFlag.MEMBER,
            type_hint=self._resolve(self._lookback.type_hint()),
        )
        self._current_scope().add_child(member)
        return self._consume_until(TokenType.SEMICOLON)

    def _on_const(self, flags: VariableFlag) -> bool:
        """Parse: const [<type>] NAME = <value>;"""
        name_tok: Token | None = None
        tok: Token | None = None
        while (tok := self._next_token()) is not None:
            if tok.type == TokenType.IDENTIFIER:
                name_tok = tok
            elif tok.type in (TokenType.EQUALS, TokenType.SEMICOLON):
                break
        if name_tok is not None:
            const = Variable(
                full_name=name_tok.value,
                line=name_tok.line,
                column=name_tok.column,
                filename=self._filename,
                flags=flags | VariableFlag.CONST,
            )
            self._current_scope().add_child(const)
        if tok is None:
            return False
        if tok.type == TokenType.EQUALS:
            return self._consume_until(TokenType.SEMICOLON)
        return True

    def _on_define(self, keyword: Token) -> None:
        """Parse: define('NAME', <value>);

        The constant is kept outside the tree because define() ignores the
        current namespace.
        """
        tok = self._next_token()
        if tok is not None and tok.type == TokenType.LPAREN:
            tok = self._next_token()
            if tok is not None and tok.type == TokenType.STRING and _is_quoted(tok.value):
                name = tok.value[1:-1]
                if not name.startswith(NS_SEPARATOR):
                    name = NS_SEPARATOR + name
                self._defines.append(
                    Variable(
                        full_name=name,
                        line=keyword.line,
                        column=keyword.column,
                        filename=self._filename,
                        flags=VariableFlag.DEFINE,
                    )
                )
        if tok is not None and tok.type != TokenType.SEMICOLON:
            self._consume_until(TokenType.SEMICOLON)

    # ------------------------------------------------------------------
    # Variables and expressions
    # ------------------------------------------------------------------

    def _on_variable(self, tok: Token) -> None:
        """Record a variable outside of class bodies, with a hint from its assignment."""
        scope = self._current_scope()
        var = scope.find_child(tok.value)
        if not isinstance(var, Variable):
            var = Variable(full_name=tok.value, line=tok.line, column=tok.column, filename=self._filename)
            scope.add_child(var)
        self._read_assignment(var)

    def _read_assignment(self, var: Variable) -> bool:
        """Peek for '= <expr>' after a variable and store the hint it gives.

        Returns False only when the input ended.
        """
        tok = self._next_token()
        if tok is None:
            return False
        if tok.type != TokenType.EQUALS:
            self._lookback.clear()
            self._unget_token(tok)
            return True
        expr = self._read_expression()
        if expr is None:
            return not self._reached_eof
        if expr.startswith("new "):
            class_name = expr[len("new ") :].strip().split("(", 1)[0].strip()
            var.type_hint = self._resolve(class_name)
        else:
            var.expression_hint = expr
        return True

    def _read_expression(self) -> str | None:
        """Read the right-hand side of an assignment.

        Stops at ';' (consumed) or at a '{' or '}' outside of parentheses
        (pushed back). Strings are not part of the captured text. Returns
        None when the expression is a require statement or the input ends.
        """
        parts: list[str] = []
        paren_depth = 0
        brace_depth = 0
        while (tok := self._next_token()) is not None:
            if tok.type == TokenType.SEMICOLON and brace_depth == 0:
                return "".join(parts)
            if tok.type == TokenType.LBRACE:
                if paren_depth == 0:
                    self._unget_token(tok)
                    return "".join(parts)
                brace_depth += 1
            elif tok.type == TokenType.RBRACE:
                if brace_depth == 0:
                    self._unget_token(tok)
                    return "".join(parts)
                brace_depth -= 1

            if tok.type in (TokenType.REQUIRE, TokenType.REQUIRE_ONCE):
                return None
            if tok.type == TokenType.STRING:
                continue
            if tok.type == TokenType.LPAREN:
                paren_depth += 1
            elif tok.type == TokenType.RPAREN:
                paren_depth = max(paren_depth - 1, 0)
            parts.append("new " if tok.type == TokenType.NEW else tok.value)
        return None

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def _on_function(self) -> None:
        """Parse a function, method or closure starting after 'function'."""
        tok = self._next_token()
        if tok is not None and tok.type == TokenType.AMPERSAND:
            # 'function &name()' returns by reference.
            tok = self._next_token()
        if tok is None:
            return

        paren_depth = 0
        if tok.type == TokenType.IDENTIFIER:
            func = Function(full_name=tok.value, line=tok.line, column=tok.column, filename=self._filename)
        elif tok.type == TokenType.LPAREN:
            paren_depth = 1
            func = Function(full_name=_CLOSURE_NAME, line=tok.line, column=tok.column, filename=self._filename)
        else:
            self._unget_token(tok)
            return

        scope = self._current_scope()
        scope.add_child(func)
        self._scopes.append(func)

        self._parse_function_signature(paren_depth)
        func.flags = self._lookback.function_flags()
        if self._lookback.contains(TokenType.ABSTRACT) or (isinstance(scope, Class) and scope.is_interface):
            func.flags |= FunctionFlag.ABSTRACT

        found_body = False
        if func.has_flag(FunctionFlag.ABSTRACT):
            end, return_type = self._read_return_type(TokenType.SEMICOLON)
        else:
            end, return_type = self._read_return_type(TokenType.LBRACE, TokenType.SEMICOLON)
            found_body = end is not None and end.type == TokenType.LBRACE
        if return_type:
            func.return_type = self._resolve(return_type)

        if found_body:
            if self._parse_function_bodies:
                self._parse_function_body()
            else:
                self._skip_block()

        if end is None or (not func.has_flag(FunctionFlag.ABSTRACT) and not found_body):
            # No terminator or no body: drop the function from the scope stack.
            self._scopes.pop()
        elif not self._reached_eof:
            self._scopes.pop()
        self._lookback.clear()

    def _parse_function_signature(self, paren_depth: int) -> None:
        """Read the parameter list, attaching each parameter to the current scope."""
        if paren_depth == 0:
            tok = self._read_until(TokenType.LPAREN, TokenType.LBRACE, TokenType.SEMICOLON)
            if tok is None:
                return
            if tok.type != TokenType.LPAREN:
                self._unget_token(tok)
                return

        depth = 1
        bracket_depth = 0
        type_hint = ""
        default_value: list[str] = []
        var: Variable | None = None
        collecting_default = False
        while (tok := self._next_token()) is not None:
            if tok.type == TokenType.VARIABLE and not collecting_default:
                var = Variable(
                    full_name=tok.value,
                    line=tok.line,
                    column=tok.column,
                    filename=self._filename,
                    flags=VariableFlag.FUNCTION_ARG,
                )
                type_hint = type_hint.strip()
                if type_hint.endswith("&"):
                    var.is_reference = True
                    type_hint = type_hint[:-1]
                var.type_hint = self._resolve(type_hint)
            elif tok.type == TokenType.LPAREN:
                depth += 1
                if collecting_default:
                    default_value.append(tok.value)
            elif tok.type == TokenType.RPAREN:
                depth -= 1
                if depth < 1:
                    self._add_parameter(var, default_value)
                    return
                if collecting_default:
                    default_value.append(tok.value)
            elif tok.type == TokenType.EQUALS and depth == 1 and bracket_depth == 0:
                collecting_default = True
            elif tok.type == TokenType.COMMA and depth == 1 and bracket_depth == 0:
                self._add_parameter(var, default_value)
                var = None
                type_hint = ""
                default_value = []
                collecting_default = False
            elif collecting_default:
                if tok.value == "[":
                    bracket_depth += 1
                elif tok.value == "]":
                    bracket_depth = max(bracket_depth - 1, 0)
                default_value.append("new " if tok.type == TokenType.NEW else tok.value)
            elif tok.type not in _SIGNATURE_SKIP:
                type_hint += tok.value

    def _add_parameter(self, var: Variable | None, default_value: list[str]) -> None:
        if var is None:
            return
        var.default_value = "".join(default_value)
        self._current_scope().add_child(var)

    def _read_return_type(self, *delims: TokenType) -> tuple[Token | None, str]:
        """Read up to one of *delims*, collecting a ': Type' return declaration.

        Returns the delimiter token (None at end of input) and the raw type.
        """
        parts: list[str] = []
        in_return_type = False
        paren_depth = 0
        while (tok := self._next_token()) is not None:
            if tok.type in delims:
                return tok, "".join(parts)
            if tok.type == TokenType.LPAREN:
                paren_depth += 1
            elif tok.type == TokenType.RPAREN:
                paren_depth -= 1
            elif tok.type == TokenType.COLON and paren_depth == 0:
                in_return_type = True
                parts = []
            elif in_return_type and tok.type in _NAME_TOKENS:
                parts.append(tok.value)
        return None, ""

    def _parse_function_body(self) -> None:
        """Record local variables until the '}' closing the function body."""
        self._lookback.clear()
        exit_depth = self._depth - 1
        func = self._current_scope()
        while (tok := self._next_token()) is not None:
            if tok.type in (TokenType.LBRACE, TokenType.SEMICOLON):
                self._lookback.clear()
            elif tok.type == TokenType.RBRACE:
                self._lookback.clear()
                if self._depth == exit_depth:
                    return
            elif tok.type == TokenType.VARIABLE:
                var = Variable(full_name=tok.value, line=tok.line, column=tok.column, filename=self._filename)
                func.add_child(var)
                if not self._read_assignment(var):
                    return


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == text[-1] and text[0] in "'\""
