"""Whisker Compiler — turns template source into an immutable token tree.

Pipeline:
    Template Source → Scanner → tag/literal stream → Compiler → token tree

The compiler keeps a flat list of finished nodes. Opening a section pushes
an :class:`~whisker.nodes.IncompleteSection` sentinel; the matching closing
tag pops every node back to that sentinel and replaces the run with a
finished :class:`~whisker.nodes.Section`. A sentinel still in the list when
the source is exhausted means the section was never closed.

Partials referenced by the source are compiled eagerly through the
environment's loader and added to the partial mapping returned alongside
the tokens. Partials the loader cannot provide are simply left out; they
render as nothing.

Example:
    >>> tokens, partials = Compiler(env, "Hello {{name}}").compile()
    >>> tokens
    (Text(lineno=1, col_offset=0, value='Hello '), EscapedTag(...))

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from whisker import nodes
from whisker.compiler.scanner import DEFAULT_DELIMITERS, Literal, Scanner, Tag
from whisker.environment.exceptions import (
    ErrorCode,
    TemplateNotFoundError,
    TemplateSyntaxError,
)

if TYPE_CHECKING:
    from whisker.environment import Environment

logger = logging.getLogger(__name__)

TOP_NAME = "-top-"

Tokens = tuple[nodes.Node, ...]


def split_path(name: str) -> tuple[str, ...]:
    """Split a dotted tag name into path segments; ``"."`` is the empty path."""
    if name == ".":
        return ()
    return tuple(part.strip() for part in name.split("."))


class Compiler:
    """Compile one template source string.

    Args:
        env: Environment providing the loader and the ``extended`` flag
        source: Template source
        partials: Already compiled partials, by name. Not mutated.
        open_delimiter: Delimiter in force at the start of ``source``
        close_delimiter: Delimiter in force at the start of ``source``
        name: Template name for error messages
    """

    def __init__(
        self,
        env: Environment,
        source: str,
        partials: Mapping[str, Tokens] | None = None,
        open_delimiter: str = DEFAULT_DELIMITERS[0],
        close_delimiter: str = DEFAULT_DELIMITERS[1],
        name: str | None = None,
    ):
        self._env = env
        self._source = source
        self._partials: dict[str, Tokens] = dict(partials or {})
        self._delimiters = (open_delimiter, close_delimiter)
        self._name = name

    def compile(self) -> tuple[Tokens, dict[str, Tokens]]:
        """Compile the source.

        Returns:
            ``(tokens, partials)`` where ``partials`` holds the given partials
            plus every partial loaded while compiling.

        Raises:
            TemplateSyntaxError: If the source is malformed
        """
        scanner = Scanner(
            self._source,
            self._delimiters,
            extended=self._env.extended,
            name=self._name,
        )
        stack: list[nodes.Node] = []
        for item in scanner.scan():
            if isinstance(item, Literal):
                stack.append(nodes.Text(item.lineno, item.col_offset, item.value))
            else:
                self._handle_tag(item, stack)

        for node in stack:
            if isinstance(node, nodes.IncompleteSection):
                raise self._error(
                    f"Unclosed section '{'.'.join(node.path) or '.'}'",
                    node.lineno,
                    node.col_offset,
                    ErrorCode.UNCLOSED_SECTION,
                )
        return tuple(stack), self._partials

    def _handle_tag(self, tag: Tag, stack: list[nodes.Node]) -> None:
        kind = tag.kind
        if kind in ("!", "="):
            return
        if kind == "name":
            stack.append(nodes.EscapedTag(tag.lineno, tag.col_offset, split_path(tag.name), tag.text))
        elif kind in ("&", "{"):
            stack.append(nodes.UnescapedTag(tag.lineno, tag.col_offset, split_path(tag.name), tag.text))
        elif kind in ("#", "^"):
            stack.append(
                nodes.IncompleteSection(
                    tag.lineno,
                    tag.col_offset,
                    split_path(tag.name),
                    kind == "^",
                    tag.text,
                    tag.delimiters,
                    tag.end,
                )
            )
        elif kind == "/":
            self._close_section(tag, stack)
        elif kind == ">":
            self._load_partial(tag.name)
            stack.append(nodes.Partial(tag.lineno, tag.col_offset, tag.name, tag.indent, tag.text))
        elif kind == "@":
            stack.append(nodes.Anchor(tag.lineno, tag.col_offset))
        elif kind in ("$", "%"):
            path = split_path(tag.name)
            # Any path starting at -top- dumps the whole root
            top = path[:1] == (TOP_NAME,)
            stack.append(
                nodes.Structured(
                    tag.lineno,
                    tag.col_offset,
                    () if top else path,
                    pretty=kind == "%",
                    top=top,
                    tag=tag.text,
                )
            )

    def _close_section(self, tag: Tag, stack: list[nodes.Node]) -> None:
        path = split_path(tag.name)
        children: list[nodes.Node] = []
        while stack:
            node = stack.pop()
            if isinstance(node, nodes.IncompleteSection):
                break
            children.append(node)
        else:
            raise self._error(
                f"Closing tag '{tag.name}' has no matching opening tag",
                tag.lineno,
                tag.col_offset,
                ErrorCode.UNMATCHED_SECTION,
            )

        if node.path != path:
            raise self._error(
                f"Closing tag '{tag.name}' does not match opening tag '{'.'.join(node.path) or '.'}'",
                tag.lineno,
                tag.col_offset,
                ErrorCode.UNMATCHED_SECTION,
            )

        children.reverse()
        if self._env.extended and not node.inverted and path == (TOP_NAME,):
            stack.append(nodes.TopSection(node.lineno, node.col_offset, tuple(children)))
            return

        open_delimiter, close_delimiter = node.delimiters
        raw = self._source[node.body_start : tag.start]
        stack.append(
            nodes.Section(
                node.lineno,
                node.col_offset,
                path,
                node.inverted,
                tuple(children),
                node.open_tag,
                tag.text,
                (open_delimiter, raw, close_delimiter),
            )
        )

    def _load_partial(self, name: str) -> None:
        loader = self._env.loader
        if name in self._partials or loader is None:
            return
        try:
            source, _ = loader.get_source(name)
        except TemplateNotFoundError:
            logger.debug("Partial %r not found; it will render as empty", name)
            return

        # Placeholder first so a partial that includes itself terminates
        self._partials[name] = ()
        tokens, partials = Compiler(
            self._env, source, self._partials, *self._env.delimiters, name=name
        ).compile()
        self._partials.update(partials)
        self._partials[name] = tokens

    def _error(self, message: str, lineno: int, col: int, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(message, lineno, self._name, self._source, col, code=code)
