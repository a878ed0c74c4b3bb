# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Plain-text rendering of a parsed file's symbol table.

The output starts with the alias table, followed by one line per entity
indented by nesting level, and finally the ``define()`` constants.
"""

from __future__ import annotations

from phpsym.model.entities import AnyEntity, Class, Function, Namespace, ParseResult, Variable
from phpsym.model.flags import FunctionFlag, VariableFlag

# ###############
# Public Interface
# ###############


def render_tree(result: ParseResult) -> str:
    """Render *result* as indented text, one entity per line."""
    lines: list[str] = ["Alias table:", _RULE]
    for alias, target in result.aliases.items():
        lines.append(f"{alias} => {target}")
    lines.append(_RULE)
    _render_entity(result.namespace, 0, lines)
    if result.defines:
        lines.append("Defines:")
        for define in result.defines:
            lines.append(f"{_INDENT}{describe(define)}")
    return "\n".join(lines) + "\n"


def describe(entity: AnyEntity) -> str:
    """Return a one-line summary of an entity."""
    if isinstance(entity, Namespace):
        return f"namespace {entity.full_name}"
    if isinstance(entity, Class):
        return _describe_class(entity)
    if isinstance(entity, Function):
        return _describe_function(entity)
    return _describe_variable(entity)


# ################
# Implementation
# ################

_RULE = "==========="
_INDENT = "    "


def _render_entity(entity: AnyEntity, level: int, lines: list[str]) -> None:
    lines.append(f"{_INDENT * level}{describe(entity)}")
    for child in entity.children:
        _render_entity(child, level + 1, lines)


def _describe_class(klass: Class) -> str:
    keyword = "interface" if klass.is_interface else "trait" if klass.is_trait else "class"
    text = f"{keyword} {klass.full_name}"
    if klass.extends:
        text += f" extends {klass.extends}"
    if klass.implements:
        text += f" implements {', '.join(klass.implements)}"
    if klass.traits:
        text += f" uses {', '.join(klass.traits)}"
    return text


def _describe_function(func: Function) -> str:
    modifiers = [name.lower() for name in ("ABSTRACT", "FINAL", "STATIC") if func.flags & FunctionFlag[name]]
    if func.visibility:
        modifiers.insert(0, func.visibility)
    params = ", ".join(param.full_name for param in func.parameters)
    text = " ".join([*modifiers, "function", f"{func.full_name}({params})"])
    if func.return_type:
        text += f": {func.return_type}"
    return text


def _describe_variable(var: Variable) -> str:
    if var.has_flag(VariableFlag.DEFINE):
        kind = "define"
    elif var.has_flag(VariableFlag.CONST):
        kind = "const"
    elif var.has_flag(VariableFlag.FUNCTION_ARG):
        kind = "parameter"
    elif var.has_flag(VariableFlag.MEMBER):
        kind = "property"
    else:
        kind = "variable"
    parts = [kind]
    if var.has_flag(VariableFlag.MEMBER) and var.visibility:
        parts.append(var.visibility)
    if var.has_flag(VariableFlag.STATIC):
        parts.append("static")
    if var.type_hint:
        parts.append(var.type_hint)
    parts.append(("&" if var.is_reference else "") + var.full_name)
    text = " ".join(parts)
    if var.default_value:
        text += f" = {var.default_value}"
    elif var.expression_hint:
        text += f" := {var.expression_hint}"
    return text
