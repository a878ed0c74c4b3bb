# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Alias table and namespace-aware name resolution for one PHP file."""

from phpsym.model.entities import NS_SEPARATOR

# ###############
# Public Interface
# ###############

PRIMITIVE_TYPES: frozenset[str] = frozenset(
    {
        "string",
        "int",
        "integer",
        "bool",
        "boolean",
        "double",
        "array",
        "mixed",
    }
)


class NameResolver:
    """Turns short or relative identifiers into absolute names.

    The alias table and the current namespace are file-scoped: a ``use``
    statement affects every resolution that happens after it, wherever it
    appears in the file.

    Attributes:
        namespace: Absolute path of the current namespace (``\\`` when global).
        aliases: Mapping from alias to absolute imported name.
    """

    def __init__(self, namespace: str = NS_SEPARATOR) -> None:
        self.namespace = namespace
        self.aliases: dict[str, str] = {}

    def add_alias(self, full_name: str, alias: str = "") -> None:
        """Import *full_name* under *alias* (default: its last path component).

        An alias that is already taken keeps its first target.
        """
        full_name = full_name.strip()
        if not full_name:
            return
        if not full_name.startswith(NS_SEPARATOR):
            full_name = NS_SEPARATOR + full_name
        alias = alias.strip() or full_name.rsplit(NS_SEPARATOR, 1)[-1]
        if alias:
            self.aliases.setdefault(alias, full_name)

    def make_absolute(self, name: str) -> str:
        """Resolve *name* against the alias table and the current namespace.

        Primitive type names and the empty string are returned unchanged.
        Qualified names (containing a separator) are only forced absolute;
        they are never adjusted by aliases or the namespace.
        """
        name = name.strip()
        if name in PRIMITIVE_TYPES or not name:
            return name
        if NS_SEPARATOR in name:
            if not name.startswith(NS_SEPARATOR):
                name = NS_SEPARATOR + name
            return name
        if name in self.aliases:
            return self.aliases[name]
        prefix = self.namespace if self.namespace.endswith(NS_SEPARATOR) else self.namespace + NS_SEPARATOR
        return prefix + name
