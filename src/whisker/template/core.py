"""Whisker Template — compiled template object ready for rendering.

Architecture:
    ```
    Template
    ├── _env: Environment                 # Config + compile hook for lambdas
    ├── _tokens: tuple[Node, ...]         # Root token list
    ├── _partials: MappingProxy[str, ...] # Partial token lists by name
    └── _name                             # For error messages
    ```

Each render builds a fresh RenderContext with the root value on the stack,
runs a Renderer over the root tokens and writes to the requested sink.

StringBuilder Pattern:
``render()`` appends chunks to a list and joins once at the end, which is
O(n) in the output size.

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (buffer, RenderContext)
- Multiple threads can render the same template concurrently, as long as
  value trees holding lambdas are not shared between those renders

"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from whisker.environment.exceptions import (
    EncodingError,
    OutputError,
    TemplateRuntimeError,
)
from whisker.render_context import RenderContext, render_context
from whisker.template.engine import Renderer
from whisker.values import Value, to_value

if TYPE_CHECKING:
    from whisker.environment import Environment
    from whisker.nodes import Node


class TextSink(Protocol):
    def write(self, text: str, /) -> Any: ...


class Template:
    """Compiled template ready for rendering.

    Attributes:
        name: Template identifier (for error messages)
        tokens: Root token list
        partials: Read-only mapping of partial name → token list

    Methods:
        render(data, **kwargs): Render to a string
        render_to(sink, data, **kwargs): Write output chunks to ``sink.write``
        render_bytes(data, **kwargs): Render to UTF-8 bytes

    Example:
            >>> from whisker import Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{name}}!")
            >>> t.render(name="World")
            'Hello, World!'

            >>> t.render({"name": "<World>"})  # Dict context also works
            'Hello, &lt;World&gt;!'

    """

    __slots__ = ("__weakref__", "_env", "_name", "_partials", "_tokens")

    def __init__(
        self,
        env: Environment,
        tokens: tuple[Node, ...],
        partials: Mapping[str, tuple[Node, ...]],
        name: str | None = None,
    ):
        # Strong reference: the Environment keeps no templates, so no cycle
        self._env = env
        self._tokens = tokens
        self._partials = MappingProxyType(dict(partials))
        self._name = name

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def tokens(self) -> tuple[Node, ...]:
        return self._tokens

    @property
    def partials(self) -> Mapping[str, tuple[Node, ...]]:
        return self._partials

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render template with given context.

        Args:
            *args: At most one context object (dict, dataclass, Value...)
            **kwargs: Context variables as keyword arguments, merged over
                a dict positional argument

        Returns:
            Rendered template as string

        Raises:
            EncodingError: If the output contains text that is not valid
                UTF-8 (lone surrogates)
            TemplateRuntimeError: If rendering fails

        Example:
            >>> t.render(name="World")
            'Hello, World!'
        """
        buf: list[str] = []
        self._render(buf.append, self._build_root(args, kwargs))
        output = "".join(buf)
        try:
            output.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Rendered output of '{self._name or '(inline)'}' is not valid UTF-8: {e.reason}"
            ) from e
        return output

    def render_bytes(self, *args: Any, **kwargs: Any) -> bytes:
        """Render template to UTF-8 encoded bytes."""
        buf: list[str] = []
        self._render(buf.append, self._build_root(args, kwargs))
        try:
            return "".join(buf).encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Rendered output of '{self._name or '(inline)'}' is not valid UTF-8: {e.reason}"
            ) from e

    def render_to(self, sink: TextSink, *args: Any, **kwargs: Any) -> None:
        """Render template, writing each output chunk to ``sink.write``.

        Chunks are written as they are produced. A failing write aborts the
        render immediately.

        Raises:
            OutputError: If ``sink.write`` raises OSError or ValueError
                (e.g. a closed file)

        Example:
            >>> buffer = io.StringIO()
            >>> t.render_to(buffer, name="World")
            >>> buffer.getvalue()
            'Hello, World!'
        """
        root = self._build_root(args, kwargs)

        def write(chunk: str) -> None:
            try:
                sink.write(chunk)
            except (OSError, ValueError) as e:
                raise OutputError(
                    f"Writing output failed: {e}",
                    template_name=self._name,
                ) from e

        self._render(write, root)

    def _build_root(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Value:
        if len(args) > 1:
            raise TypeError(
                f"render() takes at most 1 positional argument (the context), got {len(args)}"
            )
        data = args[0] if args else None
        if not kwargs:
            return to_value(data if args else {})
        if data is None:
            return to_value(kwargs)
        if isinstance(data, Mapping):
            return to_value({**data, **kwargs})
        raise TypeError("Keyword context can only be combined with a mapping context")

    def _render(self, write: Any, root: Value) -> None:
        env = self._env
        ctx = RenderContext(
            template_name=self._name,
            stack=[root],
            partials=self._partials,
            extended=env.extended,
            max_lambda_depth=env.max_lambda_depth,
        )
        with render_context(ctx):
            try:
                Renderer(env, ctx).render(write, self._tokens)
            except RecursionError as e:
                raise TemplateRuntimeError(
                    "Maximum render depth exceeded",
                    template_name=self._name,
                    suggestion="Check for partials that include themselves without a terminating section",
                ) from e

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
