# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entity tree model for PHP symbol tables (namespaces, classes, functions, variables)."""

from phpsym.model.entities import (
    NS_SEPARATOR,
    AnyEntity,
    Class,
    Entity,
    Function,
    Namespace,
    ParseResult,
    Variable,
)
from phpsym.model.flags import FunctionFlag, VariableFlag, visibility_name

__all__ = [
    # Flags
    "FunctionFlag",
    "VariableFlag",
    "visibility_name",
    # Entities
    "NS_SEPARATOR",
    "AnyEntity",
    "Entity",
    "Namespace",
    "Class",
    "Function",
    "Variable",
    "ParseResult",
]
