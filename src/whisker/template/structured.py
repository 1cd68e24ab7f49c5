"""Extended-mode output: iteration anchors and JSON emission.

    {{@}}         current key (Mapping iteration) or index (Sequence iteration)
    {{$ name }}   value as compact JSON
    {{% name }}   value as pretty JSON (two-space indent)
    {{$ -top- }}  the outermost context as JSON, wherever it is used

Scalars are written as-is rather than as JSON literals: a string is written
without quotes or escaping and a boolean as ``true``/``false``, so
``{{$.}}`` inside a list of strings reads naturally. Mapping keys are
always sorted.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker import nodes
from whisker.compiler.scanner import DEFAULT_DELIMITERS
from whisker.template.helpers import resolve
from whisker.values import Boolean, Mapping, Null, Producer, Sequence, Text, dumps

if TYPE_CHECKING:
    from whisker.render_context import RenderContext
    from whisker.template.engine import Write


class StructuredOutputMixin:
    """Mixin for Anchor and Structured nodes."""

    __slots__ = ()

    _ctx: RenderContext

    def _render_anchor(self, write: Write, node: nodes.Anchor) -> None:
        self._require_extended(node)
        anchor = self._ctx.anchor
        if anchor:
            self._write_indent(write)
            self._write(write, anchor)

    def _render_structured(self, write: Write, node: nodes.Structured) -> None:
        self._require_extended(node)
        stack = self._ctx.stack

        if node.top:
            if stack:
                self._write_indent(write)
                self._write(write, dumps(stack[0], pretty=node.pretty))
            return

        value = resolve(node.path, stack)
        if value is None or isinstance(value, Null):
            return
        if isinstance(value, Text) and not value.value:
            return

        self._write_indent(write)
        if isinstance(value, Text):
            self._write(write, value.value)
        elif isinstance(value, Boolean):
            self._write(write, str(value))
        elif isinstance(value, Producer):
            self._render_lambda(write, value, "", DEFAULT_DELIMITERS, node)
        elif isinstance(value, (Sequence, Mapping)):
            self._write(write, dumps(value, pretty=node.pretty))
