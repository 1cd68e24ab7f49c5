"""Section rendering for the Renderer.

Plain section ``{{#name}}`` behaviour by resolved value:

    absent / Null      nothing
    true / false       children once / nothing, scope unchanged
    Text               children once with the string pushed, unless empty
    Sequence           children once per item, anchor = index
    Mapping            children once with the mapping pushed; in extended
                       mode with a direct ``{{@}}`` child, once per entry in
                       key order, anchor = key
    Producer           lambda output replaces the children

Inverted section ``{{^name}}`` renders its children only for the falsy set:
absent, Null, ``false`` and the empty Sequence.

"""

from __future__ import annotations

from collections.abc import Sequence as NodeList
from typing import TYPE_CHECKING

from whisker import nodes
from whisker.template.helpers import is_falsy, resolve
from whisker.values import Boolean, Mapping, Null, Producer, Sequence, Text

if TYPE_CHECKING:
    from whisker.render_context import RenderContext
    from whisker.template.engine import Write


def has_anchor(children: NodeList[nodes.Node]) -> bool:
    """Whether any direct child is an ``{{@}}`` anchor."""
    return any(isinstance(child, nodes.Anchor) for child in children)


class SectionRenderingMixin:
    """Mixin for section, inverted section and whole-stack section nodes."""

    __slots__ = ()

    _ctx: RenderContext

    def _render_section(self, write: Write, node: nodes.Section) -> None:
        ctx = self._ctx
        value = resolve(node.path, ctx.stack)

        if node.inverted:
            if is_falsy(value):
                self.render(write, node.children)
            return

        if value is None or isinstance(value, Null):
            return
        if isinstance(value, Boolean):
            if value.value:
                self.render(write, node.children)
        elif isinstance(value, Text):
            if value.value:
                with ctx.scope(value):
                    self.render(write, node.children)
        elif isinstance(value, Sequence):
            for index, item in enumerate(value.items):
                with ctx.scope(item, str(index)):
                    self.render(write, node.children)
        elif isinstance(value, Mapping):
            if ctx.extended and has_anchor(node.children):
                self._render_entries(write, value, node.children)
            else:
                with ctx.scope(value):
                    self.render(write, node.children)
        elif isinstance(value, Producer):
            open_delimiter, raw, close_delimiter = node.lambda_source
            self._render_lambda(write, value, raw, (open_delimiter, close_delimiter), node)

    def _render_top_section(self, write: Write, node: nodes.TopSection) -> None:
        """Render children once per Mapping frame on the stack, outermost first."""
        self._require_extended(node)
        ctx = self._ctx
        anchored = has_anchor(node.children)
        # Snapshot: rendering pushes and pops frames while we iterate
        for frame in list(ctx.stack):
            if not isinstance(frame, Mapping):
                continue
            if anchored:
                self._render_entries(write, frame, node.children)
            else:
                with ctx.scope(frame):
                    self.render(write, node.children)

    def _render_entries(self, write: Write, mapping: Mapping, children: NodeList[nodes.Node]) -> None:
        ctx = self._ctx
        for key, item in mapping.sorted_items():
            with ctx.scope(item, key):
                self.render(write, children)
