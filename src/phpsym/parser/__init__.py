# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and symbol-table parser for PHP files."""

from phpsym.parser.docs import DocComment
from phpsym.parser.lexer import Token, TokenSource, TokenType, tokenize
from phpsym.parser.parser import parse, parse_file
from phpsym.parser.resolver import PRIMITIVE_TYPES, NameResolver

__all__ = [
    "DocComment",
    "NameResolver",
    "PRIMITIVE_TYPES",
    "Token",
    "TokenSource",
    "TokenType",
    "parse",
    "parse_file",
    "tokenize",
]
