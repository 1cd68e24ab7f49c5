"""Block structure nodes: sections, partials and the compiler's sentinel."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from whisker.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Section(Node):
    """Section block: {{#name}}...{{/name}}, or {{^name}}...{{/name}} when inverted.

    ``lambda_source`` is ``(open_delimiter, raw_text, close_delimiter)``: the
    unprocessed body text and the delimiters in force where the section was
    written. A lambda bound to the section receives ``raw_text`` and its
    output is compiled with those delimiters.
    """

    path: tuple[str, ...]
    inverted: bool
    children: Sequence[Node]
    open_tag: str
    close_tag: str
    lambda_source: tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class Partial(Node):
    """Partial inclusion: {{> name }}

    ``indent`` is the whitespace preceding a standalone partial tag; it is
    prepended to every line the partial renders.
    """

    name: str
    indent: str = ""
    tag: str = ""


@dataclass(frozen=True, slots=True)
class TopSection(Node):
    """Whole-stack section: {{#-top-}}...{{/-top-}} (extended mode)."""

    children: Sequence[Node]


@dataclass(frozen=True, slots=True)
class IncompleteSection(Node):
    """An opened section whose closing tag has not been seen yet.

    Only exists while the compiler builds the tree. A finished tree never
    contains one.
    """

    path: tuple[str, ...]
    inverted: bool
    open_tag: str
    delimiters: tuple[str, str]
    body_start: int
