"""Lambda re-expansion for the Renderer.

A lambda (Producer) turns text into new template source:

1. call the producer with the section's raw body, or ``""`` for a tag
2. compile the result with the delimiters in force where the tag was
   written, against the partials visible to this render
3. render the fresh tokens in place, against the current stack

Every occurrence calls the producer again; results are never cached,
because producers may be stateful.

Recursion:
    Lambda output may itself contain lambda tags. Nesting is bounded by the
    environment's ``max_lambda_depth``.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker.environment.exceptions import (
    LambdaDepthError,
    LambdaExpansionError,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
)

if TYPE_CHECKING:
    from whisker import nodes
    from whisker.environment import Environment
    from whisker.render_context import RenderContext
    from whisker.template.engine import Write
    from whisker.values import Producer


class LambdaExpansionMixin:
    """Mixin that calls producers and renders what they return."""

    __slots__ = ()

    _ctx: RenderContext
    _env: Environment

    def _render_lambda(
        self,
        write: Write,
        producer: Producer,
        source: str,
        delimiters: tuple[str, str],
        node: nodes.Node,
    ) -> None:
        ctx = self._ctx
        tag = getattr(node, "tag", None) or getattr(node, "open_tag", None)
        if ctx.max_lambda_depth is not None and ctx.lambda_depth >= ctx.max_lambda_depth:
            raise LambdaDepthError(
                f"Lambda expansion nested more than {ctx.max_lambda_depth} levels deep",
                template_name=ctx.template_name,
                tag=tag,
                lineno=node.lineno,
                suggestion="Check for a lambda whose output invokes itself",
            )

        try:
            text = producer.call(source)
        except TemplateError:
            raise
        except Exception as exc:
            raise TemplateRuntimeError(
                f"Lambda raised {type(exc).__name__}: {exc}",
                template_name=ctx.template_name,
                tag=tag,
                lineno=node.lineno,
            ) from exc

        try:
            tokens, partials = self._env.compile(
                text,
                delimiters[0],
                delimiters[1],
                ctx.partials,
                name=ctx.template_name,
            )
        except TemplateSyntaxError as exc:
            raise LambdaExpansionError(
                exc,
                template_name=ctx.template_name,
                tag=tag,
                lineno=node.lineno,
            ) from exc

        if len(partials) != len(ctx.partials):
            # Newly loaded partials stay visible for the rest of this render
            ctx.partials = partials

        ctx.lambda_depth += 1
        try:
            self.render(write, tokens)
        finally:
            ctx.lambda_depth -= 1
