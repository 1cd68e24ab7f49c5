"""Output nodes: literal text, interpolation tags and the JSON extension."""

from __future__ import annotations

from dataclasses import dataclass

from whisker.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal template text, written verbatim (modulo partial indentation)."""

    value: str


@dataclass(frozen=True, slots=True)
class EscapedTag(Node):
    """HTML-escaped interpolation: {{ name }}"""

    path: tuple[str, ...]
    tag: str = ""


@dataclass(frozen=True, slots=True)
class UnescapedTag(Node):
    """Raw interpolation: {{{ name }}} or {{& name }}"""

    path: tuple[str, ...]
    tag: str = ""


@dataclass(frozen=True, slots=True)
class Anchor(Node):
    """Current iteration key or index: {{@}} (extended mode)."""


@dataclass(frozen=True, slots=True)
class Structured(Node):
    """JSON emission: {{$ name }} compact, {{% name }} pretty (extended mode).

    ``top`` marks the reserved ``-top-`` name, which always serializes the
    outermost context regardless of the current scope.
    """

    path: tuple[str, ...]
    pretty: bool = False
    top: bool = False
    tag: str = ""
