# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entities of the per-file PHP symbol table.

The tree is a closed set of four variants (namespace, class, function,
variable) discriminated by the ``kind`` field. Each entity exclusively owns
its ``children``; the ``parent`` link is a non-owning back-reference that is
set by :meth:`Entity.add_child` and never serialized.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Literal

from pydantic import BaseModel, PrivateAttr, model_validator
from pydantic import Field as _Field

from phpsym.model.flags import FunctionFlag, VariableFlag, visibility_name

# ###############
# Public Interface
# ###############

NS_SEPARATOR = "\\"


class Entity(BaseModel):
    """Header shared by all entity variants."""

    full_name: str = ""
    short_name: str = ""
    filename: str = ""
    line: int = 0
    column: int = 0
    doc_comment: str = ""
    children: list[AnyEntity] = _Field(default_factory=list)

    _parent: Entity | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _derive_short_name(self) -> Entity:
        if not self.short_name:
            self.short_name = self.full_name.rsplit(NS_SEPARATOR, 1)[-1]
        return self

    @property
    def parent(self) -> Entity | None:
        """The enclosing entity, or None for a tree root."""
        return self._parent

    def add_child(self, child: AnyEntity) -> None:
        """Append *child* and make this entity its parent."""
        child._parent = self
        self.children.append(child)

    def find_child(self, name: str) -> AnyEntity | None:
        """Return the first direct child whose full or short name equals *name*."""
        for child in self.children:
            if child.full_name == name or child.short_name == name:
                return child
        return None

    def walk(self) -> Iterator[AnyEntity]:
        """Yield this entity and all of its descendants in pre-order."""
        yield self  # type: ignore[misc]
        for child in self.children:
            yield from child.walk()

    def __eq__(self, other: object) -> bool:
        # Structural comparison; the parent link would make the default recursive.
        if not isinstance(other, Entity) or type(self) is not type(other):
            return NotImplemented
        return self.model_dump() == other.model_dump()


class Namespace(Entity):
    """A namespace scope. The global namespace has the full name ``\\``."""

    kind: Literal["namespace"] = "namespace"


class Class(Entity):
    """A class, interface, or trait declaration."""

    kind: Literal["class"] = "class"
    extends: str = ""
    implements: list[str] = _Field(default_factory=list)
    traits: list[str] = _Field(default_factory=list)
    is_interface: bool = False
    is_trait: bool = False

    def add_implements(self, name: str) -> None:
        """Record an implemented interface unless it is already listed."""
        if name not in self.implements:
            self.implements.append(name)


class Function(Entity):
    """A function, method, or closure.

    Children are the parameters (in signature order) followed by locally
    declared variables when function bodies are parsed.
    """

    kind: Literal["function"] = "function"
    flags: FunctionFlag = FunctionFlag.NONE
    return_type: str = ""

    def has_flag(self, flag: FunctionFlag) -> bool:
        return bool(self.flags & flag)

    @property
    def visibility(self) -> str:
        return visibility_name(self.flags)

    @property
    def parameters(self) -> list[Variable]:
        """The children flagged as function arguments."""
        return [
            child
            for child in self.children
            if isinstance(child, Variable) and child.has_flag(VariableFlag.FUNCTION_ARG)
        ]


class Variable(Entity):
    """A variable, member, constant, parameter, or ``define()`` constant."""

    kind: Literal["variable"] = "variable"
    flags: VariableFlag = VariableFlag.NONE
    type_hint: str = ""
    expression_hint: str = ""
    default_value: str = ""
    is_reference: bool = False

    def has_flag(self, flag: VariableFlag) -> bool:
        return bool(self.flags & flag)

    @property
    def visibility(self) -> str:
        return visibility_name(self.flags)


# Any node of the entity tree. The `kind` discriminator keeps (de)serialization
# unambiguous.
AnyEntity = Annotated[
    Namespace | Class | Function | Variable,
    _Field(discriminator="kind"),
]


class ParseResult(BaseModel):
    """Everything produced by parsing one PHP source file.

    Attributes:
        filename: The source file path, or ``""`` for in-memory sources.
        namespace: Root of the entity tree.
        defines: Constants declared via ``define()``, which ignore namespaces.
        aliases: The file's alias table, mapping alias to absolute name.
        comments: Raw text of every comment seen, in source order.
    """

    filename: str = ""
    namespace: Namespace
    defines: list[Variable] = _Field(default_factory=list)
    aliases: dict[str, str] = _Field(default_factory=dict)
    comments: list[str] = _Field(default_factory=list)

    def alias_entities(self) -> list[Class]:
        """Materialize the alias table as lightweight class entities."""
        return [
            Class(full_name=target, short_name=alias, filename=self.filename)
            for alias, target in self.aliases.items()
        ]


# Resolve forward references in the recursive entity models.
Entity.model_rebuild()
Namespace.model_rebuild()
Class.model_rebuild()
Function.model_rebuild()
Variable.model_rebuild()
ParseResult.model_rebuild()
