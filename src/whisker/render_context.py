"""Whisker RenderContext — per-render state isolated from template data.

A RenderContext holds everything the renderer mutates while walking a token
tree: the partial indentation prefix, whether output is at the start of a
line, the current iteration anchor and the stack of section scopes. One is
created per ``render`` call and never shared.

The active context is also published through a ContextVar so code running
inside a render, most usefully a lambda, can inspect it:

    >>> def where(text):
    ...     ctx = get_render_context()
    ...     return f"item {ctx.anchor}" if ctx else text

Thread Safety:
    ContextVars are per thread / per async task; concurrent renders each
    see their own RenderContext.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whisker.nodes import Node
    from whisker.values import Value


@dataclass
class RenderContext:
    """Per-render mutable state.

    Attributes:
        template_name: Template being rendered, for error messages
        indent: Accumulated partial indentation written at each line start
        line_start: True when the next character written begins a line
        anchor: Current iteration key or index ("" outside iteration)
        stack: Section scopes, outermost (root data) first
        partials: Partial token lists visible to this render
        extended: Whether extended-mode nodes may be rendered
        lambda_depth: Current lambda re-expansion nesting
        max_lambda_depth: Limit for lambda_depth (None = unbounded)
    """

    template_name: str | None = None
    indent: str = ""
    line_start: bool = True
    anchor: str = ""
    stack: list[Value] = field(default_factory=list)
    partials: Mapping[str, tuple[Node, ...]] = field(default_factory=dict)
    extended: bool = False
    lambda_depth: int = 0
    max_lambda_depth: int | None = None

    @property
    def current(self) -> Value | None:
        """Innermost scope value, or None when the stack is empty."""
        return self.stack[-1] if self.stack else None

    @contextmanager
    def scope(self, value: Value, anchor: str | None = None) -> Iterator[None]:
        """Push ``value`` (and optionally bind the anchor) for the enclosed render.

        The enclosing anchor is restored on exit, so after an iteration the
        anchor is ``""`` at top level and the outer item's key when nested.
        """
        saved = self.anchor
        self.stack.append(value)
        if anchor is not None:
            self.anchor = anchor
        try:
            yield
        finally:
            self.anchor = saved
            self.stack.pop()

    @contextmanager
    def indented(self, indent: str) -> Iterator[None]:
        """Extend the indentation prefix for the enclosed render."""
        saved = self.indent
        self.indent = saved + indent
        try:
            yield
        finally:
            self.indent = saved


# Module-level ContextVar
_render_context: ContextVar[RenderContext | None] = ContextVar(
    "whisker_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in render)."""
    return _render_context.get()


def get_render_context_required() -> RenderContext:
    """Get current render context, raise if not in render.

    Raises:
        RuntimeError: If not in a render context
    """
    ctx = _render_context.get()
    if ctx is None:
        raise RuntimeError("Not in a render context")
    return ctx


@contextmanager
def render_context(ctx: RenderContext) -> Iterator[RenderContext]:
    """Publish ``ctx`` as the current render context for the with block.

    Restores the previous context on exit, so nested renders (a lambda that
    renders another template) behave.
    """
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
