# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rolling buffer of the tokens read since the last statement boundary.

Modifiers such as ``abstract public static`` come before the keyword that
tells the parser what is being declared, so they are recovered afterwards by
scanning this buffer front to back.
"""

from collections.abc import Iterator

from phpsym.model.flags import FunctionFlag, VariableFlag
from phpsym.parser.lexer import Token, TokenType

# ###############
# Public Interface
# ###############


class LookBackBuffer:
    """FIFO of tokens accumulated since the last reset point."""

    def __init__(self) -> None:
        self._tokens: list[Token] = []

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def append(self, token: Token) -> None:
        self._tokens.append(token)

    def pop(self, token: Token) -> None:
        """Drop *token* if it is the newest entry (push-back compensation)."""
        if self._tokens and self._tokens[-1] is token:
            self._tokens.pop()

    def clear(self) -> None:
        self._tokens.clear()

    def contains(self, token_type: TokenType) -> bool:
        return any(tok.type == token_type for tok in self._tokens)

    def function_flags(self) -> FunctionFlag:
        """Recover function modifiers. No visibility bit is set unless a keyword is seen."""
        flags = FunctionFlag.NONE
        for tok in self._tokens:
            if tok.type == TokenType.ABSTRACT:
                flags |= FunctionFlag.ABSTRACT
            elif tok.type == TokenType.FINAL:
                flags |= FunctionFlag.FINAL
            elif tok.type == TokenType.STATIC:
                flags |= FunctionFlag.STATIC
            elif tok.type in _VISIBILITY:
                flags &= ~_FUNCTION_VISIBILITY_MASK
                flags |= FunctionFlag[tok.type.name]
        return flags

    def variable_flags(self) -> VariableFlag:
        """Recover variable modifiers. Visibility defaults to public."""
        flags = VariableFlag.PUBLIC
        for tok in self._tokens:
            if tok.type == TokenType.STATIC:
                flags |= VariableFlag.STATIC
            elif tok.type == TokenType.CONST:
                flags |= VariableFlag.CONST
            elif tok.type in _VISIBILITY:
                flags &= ~_VARIABLE_VISIBILITY_MASK
                flags |= VariableFlag[tok.type.name]
        return flags

    def type_hint(self) -> str:
        """Return the run of name tokens directly before the newest token.

        For ``private ?Foo\\Bar $x`` (with ``$x`` the newest token) this is
        ``Foo\\Bar``. Names and separators must alternate, so modifiers that
        are not keywords (``readonly int $x``) are left out.
        """
        parts: list[str] = []
        expect_name = True
        for tok in reversed(self._tokens[:-1]):
            if tok.type == TokenType.IDENTIFIER and expect_name:
                expect_name = False
            elif tok.type == TokenType.NS_SEPARATOR:
                expect_name = True
            else:
                break
            parts.append(tok.value)
        return "".join(reversed(parts))


# ################
# Implementation
# ################

_VISIBILITY: frozenset[TokenType] = frozenset({TokenType.PUBLIC, TokenType.PRIVATE, TokenType.PROTECTED})

_FUNCTION_VISIBILITY_MASK = FunctionFlag.PUBLIC | FunctionFlag.PRIVATE | FunctionFlag.PROTECTED
_VARIABLE_VISIBILITY_MASK = VariableFlag.PUBLIC | VariableFlag.PRIVATE | VariableFlag.PROTECTED
