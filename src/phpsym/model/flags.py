# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Modifier flag sets carried by function and variable entities."""

from __future__ import annotations

import enum

# ###############
# Public Interface
# ###############


class FunctionFlag(enum.IntFlag):
    """Modifiers of a function or method."""

    NONE = 0
    PUBLIC = 1 << 0
    PRIVATE = 1 << 1
    PROTECTED = 1 << 2
    STATIC = 1 << 3
    ABSTRACT = 1 << 4
    FINAL = 1 << 5


class VariableFlag(enum.IntFlag):
    """Modifiers and roles of a variable, constant, or parameter."""

    NONE = 0
    PUBLIC = 1 << 0
    PRIVATE = 1 << 1
    PROTECTED = 1 << 2
    STATIC = 1 << 3
    CONST = 1 << 4
    MEMBER = 1 << 5
    FUNCTION_ARG = 1 << 6
    DEFINE = 1 << 7


def visibility_name(flags: int) -> str:
    """Return ``"public"``, ``"private"``, ``"protected"`` or ``""`` for a flag set.

    Function and variable flags share the same bit positions for visibility.
    """
    if flags & FunctionFlag.PUBLIC:
        return "public"
    if flags & FunctionFlag.PRIVATE:
        return "private"
    if flags & FunctionFlag.PROTECTED:
        return "protected"
    return ""
