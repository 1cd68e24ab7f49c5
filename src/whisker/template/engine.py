"""Whisker Renderer — interprets a token tree against a context stack.

The Renderer walks each token list in order, dispatching on node type
through a dict (O(1) per node), and recurses into sections, partials and
lambda output. All mutable state lives in the
:class:`~whisker.render_context.RenderContext`; the Renderer itself only
binds that context to an environment.

Output goes through a ``write(str)`` callable. Escaped tags render into a
scratch list first and escape the whole result, which is how lambda output
inside ``{{ }}`` ends up escaped too.

Indentation:
    Partials included on a standalone line indent every line they produce.
    The prefix is written lazily: only when something is about to be
    written while ``line_start`` is set, and never in front of a bare
    newline. ``line_start`` survives across tokens so a line whose first
    characters come from a tag is indented correctly.

Composition:
    ``Renderer`` mixes in section handling (``sections``), lambda
    re-expansion (``lambdas``) and the JSON extension (``structured``).

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence as NodeList
from typing import TYPE_CHECKING, ClassVar

from whisker import nodes
from whisker.compiler.scanner import DEFAULT_DELIMITERS
from whisker.environment.exceptions import (
    ErrorCode,
    IncompleteSectionError,
    TemplateRuntimeError,
)
from whisker.template.helpers import resolve
from whisker.template.lambdas import LambdaExpansionMixin
from whisker.template.sections import SectionRenderingMixin
from whisker.template.structured import StructuredOutputMixin
from whisker.utils.html import html_escape
from whisker.values import Boolean, Null, Producer, Text

if TYPE_CHECKING:
    from whisker.environment import Environment
    from whisker.render_context import RenderContext

logger = logging.getLogger(__name__)

Write = Callable[[str], None]


class Renderer(SectionRenderingMixin, LambdaExpansionMixin, StructuredOutputMixin):
    """Interpreter for one render call.

    Not thread-safe: a Renderer and its RenderContext belong to a single
    render. The token trees it reads are immutable and may be shared.
    """

    __slots__ = ("_ctx", "_env")

    _HANDLERS: ClassVar[dict[type[nodes.Node], Callable[..., None]]] = {}

    def __init__(self, env: Environment, ctx: RenderContext):
        self._env = env
        self._ctx = ctx

    def render(self, write: Write, tokens: NodeList[nodes.Node]) -> None:
        """Render ``tokens`` in order against the current context."""
        handlers = self._HANDLERS
        for node in tokens:
            handler = handlers.get(type(node))
            if handler is None:
                self._unknown_node(node)
            else:
                handler(self, write, node)

    # ------------------------------------------------------------------
    # Low-level output
    # ------------------------------------------------------------------

    def _write(self, write: Write, value: str) -> None:
        """Write ``value`` and remember whether it ended a line."""
        if not value:
            return
        write(value)
        self._ctx.line_start = value[-1] == "\n"

    def _write_indent(self, write: Write) -> None:
        ctx = self._ctx
        if ctx.line_start and ctx.indent:
            write(ctx.indent)
            ctx.line_start = False

    # ------------------------------------------------------------------
    # Node handlers
    # ------------------------------------------------------------------

    def _render_text(self, write: Write, node: nodes.Text) -> None:
        value = node.value
        if not self._ctx.indent:
            self._write(write, value)
            return

        pos = 0
        length = len(value)
        while pos < length:
            newline = value.find("\n", pos)
            end = length if newline == -1 else newline + 1
            if value[pos] != "\n":
                self._write_indent(write)
            self._write(write, value[pos:end])
            pos = end

    def _render_escaped(self, write: Write, node: nodes.EscapedTag) -> None:
        buf: list[str] = []
        self._render_interpolation(buf.append, node.path, node)
        if buf:
            write(html_escape("".join(buf)))

    def _render_unescaped(self, write: Write, node: nodes.UnescapedTag) -> None:
        self._render_interpolation(write, node.path, node)

    def _render_interpolation(
        self,
        write: Write,
        path: tuple[str, ...],
        node: nodes.EscapedTag | nodes.UnescapedTag,
    ) -> None:
        value = resolve(path, self._ctx.stack)
        if value is None or isinstance(value, Null):
            return

        if isinstance(value, Text):
            if value.value:
                self._write_indent(write)
                self._write(write, value.value)
        elif isinstance(value, Boolean):
            self._write_indent(write)
            self._write(write, str(value))
        elif isinstance(value, Producer):
            self._write_indent(write)
            self._render_lambda(write, value, "", DEFAULT_DELIMITERS, node)
        else:
            logger.warning(
                "Tag %s in %s resolved to a %s; use a section to render collections. "
                "Skipping it.",
                node.tag or ".".join(path),
                self._ctx.template_name or "<template>",
                type(value).__name__,
            )

    def _render_partial(self, write: Write, node: nodes.Partial) -> None:
        tokens = self._ctx.partials.get(node.name)
        if tokens is None:
            return
        with self._ctx.indented(node.indent):
            self.render(write, tokens)

    def _render_incomplete(self, write: Write, node: nodes.IncompleteSection) -> None:
        name = ".".join(node.path) or "."
        logger.error(
            "Bug: unfinished section %r (line %d) reached the renderer", name, node.lineno
        )
        raise IncompleteSectionError(
            f"Unfinished section '{name}' found in compiled template",
            template_name=self._ctx.template_name,
            tag=node.open_tag,
            lineno=node.lineno,
        )

    def _unknown_node(self, node: nodes.Node) -> None:
        logger.error("Bug: renderer has no handler for %s", type(node).__name__)
        raise TemplateRuntimeError(
            f"Cannot render node of type {type(node).__name__}",
            template_name=self._ctx.template_name,
            lineno=node.lineno,
        )

    def _require_extended(self, node: nodes.Node) -> None:
        if not self._ctx.extended:
            logger.error(
                "Bug: extended node %s in a template rendered without extended mode",
                type(node).__name__,
            )
            raise TemplateRuntimeError(
                f"{type(node).__name__} requires an Environment with extended=True",
                template_name=self._ctx.template_name,
                lineno=node.lineno,
                code=ErrorCode.EXTENSION_DISABLED,
            )


Renderer._HANDLERS = {
    nodes.Text: Renderer._render_text,
    nodes.EscapedTag: Renderer._render_escaped,
    nodes.UnescapedTag: Renderer._render_unescaped,
    nodes.Section: Renderer._render_section,
    nodes.Partial: Renderer._render_partial,
    nodes.IncompleteSection: Renderer._render_incomplete,
    nodes.Anchor: Renderer._render_anchor,
    nodes.Structured: Renderer._render_structured,
    nodes.TopSection: Renderer._render_top_section,
}
