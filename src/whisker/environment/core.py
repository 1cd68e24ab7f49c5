"""Whisker Environment — configuration and template factory.

The Environment holds everything that is fixed across renders: the loader
used for ``get_template`` and partials, the starting delimiters, whether
the structured-data extension is enabled, and the lambda nesting bound.

Example:
    >>> from whisker import DictLoader, Environment
    >>> env = Environment(loader=DictLoader({"item": "<li>{{.}}</li>"}))
    >>> env.from_string("{{#items}}{{> item}}{{/items}}").render(items=["a", "b"])
    '<li>a</li><li>b</li>'

Thread-Safety:
Environments are not mutated after construction. ``compile`` builds new
token tuples and partial dicts on every call, so one Environment can serve
any number of threads.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from whisker.compiler import DEFAULT_DELIMITERS, Compiler
from whisker.environment.exceptions import ErrorCode, TemplateSyntaxError
from whisker.template import Template

if TYPE_CHECKING:
    from whisker.environment.loaders import Loader
    from whisker.nodes import Node

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration for compiling and rendering templates.

    Args:
        loader: Source of named templates and partials (None = strings only)
        extended: Enable ``{{@}}``, ``{{$...}}``, ``{{%...}}`` and ``-top-``
        max_lambda_depth: Maximum nested lambda re-expansion (None = no bound)
        open_delimiter: Opening delimiter at the start of every template
        close_delimiter: Closing delimiter at the start of every template

    Example:
        >>> env = Environment(extended=True)
        >>> env.from_string("{{#list}}{{@}}={{.}} {{/list}}").render(list=["x", "y"])
        '0=x 1=y '
    """

    __slots__ = (
        "__weakref__",
        "_close_delimiter",
        "_extended",
        "_loader",
        "_max_lambda_depth",
        "_open_delimiter",
    )

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        extended: bool = False,
        max_lambda_depth: int | None = 64,
        open_delimiter: str = DEFAULT_DELIMITERS[0],
        close_delimiter: str = DEFAULT_DELIMITERS[1],
    ):
        if not open_delimiter or not close_delimiter:
            raise TemplateSyntaxError(
                "Delimiters must not be empty",
                code=ErrorCode.INVALID_DELIMITERS,
            )
        if any(c.isspace() or c == "=" for c in open_delimiter + close_delimiter):
            raise TemplateSyntaxError(
                f"Invalid delimiters {open_delimiter!r} {close_delimiter!r}: "
                "whitespace and '=' are not allowed",
                code=ErrorCode.INVALID_DELIMITERS,
            )
        if max_lambda_depth is not None and max_lambda_depth < 1:
            raise ValueError(f"max_lambda_depth must be positive or None, got {max_lambda_depth}")
        self._loader = loader
        self._extended = extended
        self._max_lambda_depth = max_lambda_depth
        self._open_delimiter = open_delimiter
        self._close_delimiter = close_delimiter

    @property
    def loader(self) -> Loader | None:
        return self._loader

    @property
    def extended(self) -> bool:
        return self._extended

    @property
    def max_lambda_depth(self) -> int | None:
        return self._max_lambda_depth

    @property
    def delimiters(self) -> tuple[str, str]:
        return self._open_delimiter, self._close_delimiter

    def compile(
        self,
        source: str,
        open_delimiter: str | None = None,
        close_delimiter: str | None = None,
        partials: Mapping[str, tuple[Node, ...]] | None = None,
        *,
        name: str | None = None,
    ) -> tuple[tuple[Node, ...], dict[str, tuple[Node, ...]]]:
        """Compile ``source`` into a token tree.

        This is the hook the renderer uses to re-expand lambda output, so
        the delimiters and partials can be those in force at the call site.

        Args:
            source: Template source
            open_delimiter: Starting delimiter (environment default if None)
            close_delimiter: Starting delimiter (environment default if None)
            partials: Partials already compiled; returned unchanged, plus any
                partial this source references that the loader can provide
            name: Template name for error messages

        Returns:
            ``(tokens, partials)``

        Raises:
            TemplateSyntaxError: If the source is malformed
        """
        return Compiler(
            self,
            source,
            partials,
            open_delimiter or self._open_delimiter,
            close_delimiter or self._close_delimiter,
            name=name,
        ).compile()

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile a template from a string.

        Args:
            source: Template source
            name: Optional name used in error messages

        Raises:
            TemplateSyntaxError: If the source is malformed
        """
        tokens, partials = self.compile(source, name=name)
        return Template(self, tokens, partials, name)

    def get_template(self, name: str) -> Template:
        """Load and compile a template through the loader.

        Raises:
            RuntimeError: If no loader is configured
            TemplateNotFoundError: If the loader has no such template
            TemplateSyntaxError: If the template is malformed
        """
        if self._loader is None:
            raise RuntimeError("No loader configured. Use from_string() or pass loader=...")
        source, origin = self._loader.get_source(name)
        logger.debug("Loaded template %r from %s", name, origin or "<loader>")
        return self.from_string(source, name=name)

    def __repr__(self) -> str:
        return (
            f"<Environment extended={self._extended} "
            f"delimiters={self._open_delimiter!r},{self._close_delimiter!r}>"
        )
