"""Pure runtime helpers used by the renderer.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

from collections.abc import Sequence as PathSegments

from whisker.values import Boolean, Mapping, Null, Sequence, Value


def resolve(path: PathSegments[str], stack: list[Value]) -> Value | None:
    """Resolve a tag path against the context stack.

    - An empty path (``{{.}}``) names the innermost scope.
    - Otherwise the first segment is looked up in each Mapping on the
      stack, innermost first; scalar and Sequence frames are skipped.
    - Remaining segments must each step into a Mapping that has the key.

    Returns None when anything is missing. Resolution never raises: absent
    data renders as nothing.

    Example:
        >>> stack = [to_value({"a": {"b": "x"}}), to_value("item")]
        >>> resolve(("a", "b"), stack)
        Text(value='x')
        >>> resolve((), stack)
        Text(value='item')
    """
    if not path:
        return stack[-1] if stack else None

    head = path[0]
    value: Value | None = None
    for frame in reversed(stack):
        if isinstance(frame, Mapping):
            value = frame.entries.get(head)
            if value is not None:
                break
    if value is None:
        return None

    for part in path[1:]:
        if not isinstance(value, Mapping):
            return None
        value = value.entries.get(part)
        if value is None:
            return None
    return value


def is_falsy(value: Value | None) -> bool:
    """True for the values that make an inverted section render.

    The falsy set is: absent, Null, ``false`` and the empty Sequence.
    Everything else, the empty string and empty Mapping included, is truthy
    for inverted sections.
    """
    if value is None or isinstance(value, Null):
        return True
    if isinstance(value, Boolean):
        return not value.value
    if isinstance(value, Sequence):
        return not value.items
    return False
