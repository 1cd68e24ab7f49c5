"""Base node class for the Whisker token tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all token tree nodes.

    All nodes track their source location for error reporting.
    Nodes are immutable so a compiled tree can be shared across threads.

    """

    lineno: int
    col_offset: int
