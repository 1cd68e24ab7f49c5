"""Template loaders for the Whisker environment.

Loaders supply template and partial source to the Environment. They
implement ``get_source(name)`` returning ``(source, origin)`` and raise
:class:`TemplateNotFoundError` when the name is unknown.

Built-in Loaders:
- `DictLoader`: In-memory mapping of name → source
- `FunctionLoader`: Wrap a callable (database, CMS, cache...)
- `ChoiceLoader`: Try several loaders in order (overrides + defaults)

Partials are looked up through the same loader: ``{{> header }}`` asks for
``"header"``. A partial the loader cannot provide renders as nothing.

Custom Loaders:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM partials WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row.source, f"db://{name}"
    ```

Thread-Safety:
Loaders should be safe for concurrent ``get_source()`` calls. DictLoader
only reads its mapping; ChoiceLoader and FunctionLoader delegate.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Protocol

from whisker.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class DictLoader:
    """Load templates from an in-memory dictionary.

    Example:
            >>> loader = DictLoader({
            ...     "page": "<h1>{{title}}</h1>\\n{{> footer}}",
            ...     "footer": "<footer>{{site}}</footer>",
            ... })
            >>> env = Environment(loader=loader)
            >>> env.get_template("page").render(title="Hi", site="Example")
            '<h1>Hi</h1>\\n<footer>Example</footer>'

    Raises:
        TemplateNotFoundError: If template name not in mapping
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class FunctionLoader:
    """Wrap a callable as a template loader.

    The function takes a name and returns the source as ``str``, a
    ``(source, origin)`` tuple, or ``None`` when the name is unknown.

    Example:
            >>> def load(name):
            ...     return "Hello, {{name}}!" if name == "greeting" else None
            >>> env = Environment(loader=FunctionLoader(load))
            >>> env.get_template("greeting").render(name="World")
            'Hello, World!'
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[str], str | tuple[str, str | None] | None]):
        self._func = func

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._func(name)
        if result is None:
            raise TemplateNotFoundError(f"Template '{name}' not found (function loader returned None)")
        if isinstance(result, str):
            return result, "<function>"
        return result


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Example:
            >>> custom = DictLoader({"nav": "<nav>Custom</nav>"})
            >>> default = DictLoader({"nav": "<nav>Default</nav>", "footer": "<footer/>"})
            >>> env = Environment(loader=ChoiceLoader([custom, default]))
            >>> env.get_template("nav").render()
            '<nav>Custom</nav>'

    Raises:
        TemplateNotFoundError: If no loader can find the template
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders"
        )

    def list_templates(self) -> list[str]:
        templates: set[str] = set()
        for loader in self._loaders:
            if hasattr(loader, "list_templates"):
                templates.update(loader.list_templates())
        return sorted(templates)
