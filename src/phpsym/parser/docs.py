# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Doc-comment parsing and the comment-to-entity association pass.

The association pass runs once per file after the token stream is
exhausted. It matches each entity with the block comment that ends before
it on the same line, or failing that on the line directly above it. A comment
documents at most one entity, the first one after it. The pass stores the raw comment
and fills empty type information from ``@var``, ``@param`` and ``@return``
tags. It never adds or removes entities.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from phpsym.model.entities import Entity, Function, Namespace, Variable
from phpsym.model.flags import VariableFlag
from phpsym.parser.lexer import Token, TokenType
from phpsym.parser.resolver import NameResolver

# ###############
# Public Interface
# ###############


@dataclass
class DocComment:
    """The tags of a ``/** ... */`` block that the symbol table cares about.

    Attributes:
        summary: Free text before the first tag, joined into one line.
        var_type: Type named by ``@var``.
        return_type: Type named by ``@return``.
        params: Parameter name (with ``$``) to type, from ``@param`` tags.
    """

    summary: str = ""
    var_type: str = ""
    return_type: str = ""
    params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> DocComment:
        """Parse the raw text of a block comment."""
        doc = cls()
        summary: list[str] = []
        in_tags = False
        for line in _comment_lines(text):
            match = _TAG_RE.match(line)
            if match is None:
                if not in_tags and line:
                    summary.append(line)
                continue
            in_tags = True
            tag, rest = match.group(1).lower(), match.group(2).split()
            if tag == "var" and rest:
                doc.var_type = _primary_type(rest[0])
            elif tag == "return" and rest:
                doc.return_type = _primary_type(rest[0])
            elif tag == "param" and rest:
                if rest[0].startswith("$"):
                    # '@param $name Type' ordering is tolerated.
                    if len(rest) > 1:
                        doc.params[rest[0]] = _primary_type(rest[1])
                elif len(rest) > 1 and rest[1].lstrip("&.").startswith("$"):
                    doc.params[rest[1].lstrip("&.")] = _primary_type(rest[0])
        doc.summary = " ".join(summary)
        return doc


def associate_comments(
    root: Namespace,
    defines: list[Variable],
    comments: list[Token],
    resolver: NameResolver,
    filename: str,
) -> None:
    """Attach doc comments to entities and backfill their filename.

    Args:
        root: The namespace at the root of the file's entity tree.
        defines: ``define()`` constants, which live outside the tree.
        comments: The comment pool collected while parsing, in source order.
        resolver: Resolves types named in doc tags.
        filename: Recorded on every entity whose filename is still empty.
    """
    blocks = [comment for comment in comments if comment.type == TokenType.BLOCK_COMMENT]
    by_end_line: dict[int, list[int]] = {}
    for index, comment in enumerate(blocks):
        by_end_line.setdefault(comment.end_line, []).append(index)

    candidates: list[Entity] = []
    for entity in [*root.walk(), *defines]:
        if not entity.filename:
            entity.filename = filename
        if isinstance(entity, Namespace) or entity.line <= 0:
            continue
        if isinstance(entity, Variable) and entity.has_flag(VariableFlag.FUNCTION_ARG):
            # Parameters take their types from the function's @param tags.
            continue
        candidates.append(entity)

    # A comment documents only the first entity that follows it.
    claimed: set[int] = set()
    for entity in sorted(candidates, key=lambda e: (e.line, e.column)):
        index = _preceding_comment(blocks, by_end_line, entity)
        if index is None or index in claimed:
            continue
        claimed.add(index)
        entity.doc_comment = blocks[index].value
        _apply(entity, DocComment.parse(blocks[index].value), resolver)


# ################
# Implementation
# ################

_TAG_RE = re.compile(r"@(\w+)\s*(.*)")


def _comment_lines(text: str) -> list[str]:
    """Strip the comment delimiters and leading asterisks from each line."""
    body = text
    if body.startswith("/*"):
        body = body[2:].lstrip("*")
    if body.endswith("*/"):
        body = body[:-2]
    lines = []
    for raw in body.splitlines():
        lines.append(raw.strip().lstrip("*").strip())
    return lines


def _primary_type(type_text: str) -> str:
    """Pick the first non-null member of a ``Foo|null`` union and drop ``?``."""
    for part in type_text.split("|"):
        part = part.strip().lstrip("?")
        if part and part.lower() != "null":
            return part
    return ""


def _preceding_comment(blocks: list[Token], by_end_line: dict[int, list[int]], entity: Entity) -> int | None:
    """Index of the block comment ending before the entity on its line, else on the line above."""
    same_line = [i for i in by_end_line.get(entity.line, []) if blocks[i].end_column <= entity.column]
    if same_line:
        return same_line[-1]
    above = by_end_line.get(entity.line - 1)
    return above[-1] if above else None


def _apply(entity: Entity, doc: DocComment, resolver: NameResolver) -> None:
    if isinstance(entity, Variable):
        if not entity.type_hint and doc.var_type:
            entity.type_hint = resolver.make_absolute(doc.var_type)
    elif isinstance(entity, Function):
        if not entity.return_type and doc.return_type:
            entity.return_type = resolver.make_absolute(doc.return_type)
        for param in entity.parameters:
            doc_type = doc.params.get(param.full_name)
            if doc_type and not param.type_hint:
                param.type_hint = resolver.make_absolute(doc_type)
