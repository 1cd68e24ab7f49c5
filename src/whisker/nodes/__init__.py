"""Whisker token tree — immutable nodes produced by the compiler.

Node Categories:
    Output: Text, EscapedTag, UnescapedTag
    Structure: Section, Partial, IncompleteSection
    Extended mode: Anchor, Structured, TopSection

All nodes are frozen, slotted dataclasses carrying ``lineno`` and
``col_offset``. Child lists are tuples, so a compiled tree is safe to share
between threads.

"""

from whisker.nodes.base import Node
from whisker.nodes.output import Anchor, EscapedTag, Structured, Text, UnescapedTag
from whisker.nodes.structure import IncompleteSection, Partial, Section, TopSection

__all__ = [
    "Anchor",
    "EscapedTag",
    "IncompleteSection",
    "Node",
    "Partial",
    "Section",
    "Structured",
    "Text",
    "TopSection",
    "UnescapedTag",
]
