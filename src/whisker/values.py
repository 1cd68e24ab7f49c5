"""Value model — the data a template can observe.

Every object reachable from a render is one variant of the closed
:class:`Value` union:

    Null | Text | Boolean | Sequence | Mapping | Producer

Host data is converted once at the render boundary by :func:`to_value`;
the renderer only ever reads values and never mutates them.

Producers (lambdas) are the one stateful variant. They wrap a
``str -> str`` callable that may keep counters or other state between
calls, so they are invoked through :meth:`Producer.call`, which holds an
exclusive guard for the duration of the call.

Example:
    >>> to_value({"name": "Ferris", "tags": ["a", "b"], "admin": False})
    Mapping(entries={'name': Text(value='Ferris'), 'tags': Sequence(...), ...})

Serialization:
    :func:`to_python` and :func:`dumps` always emit mapping keys in
    lexicographic order, and a Producer serializes as ``None``/``null``.

"""

from __future__ import annotations

import dataclasses
import json
import logging
import threading
from collections import abc
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from whisker.environment.exceptions import (
    ConversionError,
    ErrorCode,
    ProducerBusyError,
    TemplateRuntimeError,
)

logger = logging.getLogger(__name__)


class Value:
    """Base class for all template values."""

    __slots__ = ()


@dataclass(frozen=True, slots=True, eq=False)
class Null(Value):
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Producer):
            return other.__eq__(self)
        return isinstance(other, Null)

    def __hash__(self) -> int:
        return hash(None)


@dataclass(frozen=True, slots=True, eq=False)
class Text(Value):
    value: str

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Producer):
            return other.__eq__(self)
        return isinstance(other, Text) and other.value == self.value

    def __hash__(self) -> int:
        return hash(self.value)


@dataclass(frozen=True, slots=True, eq=False)
class Boolean(Value):
    value: bool

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Producer):
            return other.__eq__(self)
        return isinstance(other, Boolean) and other.value is self.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True, eq=False)
class Sequence(Value):
    """Ordered list of values."""

    items: tuple[Value, ...] = ()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Producer):
            return other.__eq__(self)
        if not isinstance(other, Sequence) or len(other.items) != len(self.items):
            return False
        # Element-wise so that producers nested in either side are reported.
        return all(a == b for a, b in zip(self.items, other.items))

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, slots=True, eq=False)
class Mapping(Value):
    """String-keyed, unordered collection of values.

    Keys are unique by construction. Iteration order is insertion order but
    carries no meaning; use :meth:`sorted_items` when order must be stable.
    """

    entries: dict[str, Value] = dataclasses.field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Producer):
            return other.__eq__(self)
        if not isinstance(other, Mapping) or other.entries.keys() != self.entries.keys():
            return False
        return all(value == other.entries[key] for key, value in self.entries.items())

    __hash__ = None  # type: ignore[assignment]

    def get(self, key: str) -> Value | None:
        return self.entries.get(key)

    def sorted_items(self) -> list[tuple[str, Value]]:
        return sorted(self.entries.items())


class Producer(Value):
    """A lambda: stateful ``str -> str`` function whose output is template source.

    Each textual occurrence of a lambda tag triggers its own call, so a
    producer that counts its invocations sees one call per occurrence.

    Producers are not comparable. Any equality check involving one is a
    programming error: it is logged and answers ``False``.

    Thread-Safety:
        A producer owns mutable state and must not be shared between
        concurrent renders. :meth:`call` takes a non-blocking guard; a
        second thread arriving while the guard is held gets
        :class:`ProducerBusyError` instead of racing on that state.
    """

    __slots__ = ("_func", "_guard")

    def __init__(self, func: Callable[[str], str]):
        self._func = func
        self._guard = threading.Lock()

    @property
    def func(self) -> Callable[[str], str]:
        return self._func

    def call(self, text: str) -> str:
        """Invoke the wrapped function with exclusive access.

        Raises:
            ProducerBusyError: If another thread is currently inside this producer
            TemplateRuntimeError: If the function does not return a string
        """
        if not self._guard.acquire(blocking=False):
            raise ProducerBusyError(
                f"Lambda {self._describe()} is already being invoked",
                suggestion="Render value trees that contain lambdas from one thread at a time",
            )
        try:
            result = self._func(text)
        finally:
            self._guard.release()
        if not isinstance(result, str):
            raise TemplateRuntimeError(
                f"Lambda {self._describe()} returned {type(result).__name__}, expected str",
                code=ErrorCode.LAMBDA_RESULT,
            )
        return result

    def _describe(self) -> str:
        return getattr(self._func, "__qualname__", None) or repr(self._func)

    def __eq__(self, other: object) -> bool:
        logger.error(
            "Cannot compare lambdas (%s == %r); treating them as unequal",
            self._describe(),
            other,
        )
        return False

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"Producer({self._describe()})"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


# =============================================================================
# Host adapter
# =============================================================================


def to_value(obj: Any) -> Value:
    """Convert a plain Python object into a :class:`Value` tree.

    Conversion rules:
        - ``Value`` instances pass through unchanged
        - ``None`` → Null, ``bool`` → Boolean, ``str`` → Text
        - ``int``, ``float``, ``Decimal`` → Text of their ``str()``
        - mappings → Mapping (keys must be ``str``)
        - dataclass instances → Mapping of their fields
        - lists, tuples and other iterables → Sequence
        - ``set``/``frozenset`` → Sequence, sorted for deterministic output
        - other callables → Producer

    Raises:
        ConversionError: For unsupported types, non-string keys, or cycles
    """
    return _convert(obj, set())


def _convert(obj: Any, active: set[int]) -> Value:
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NULL
    if isinstance(obj, bool):
        return TRUE if obj else FALSE
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, (int, float, Decimal)):
        return Text(str(obj))
    if isinstance(obj, (bytes, bytearray, memoryview)):
        raise ConversionError(
            f"Cannot convert {type(obj).__name__} to a template value; decode it to str first"
        )

    marker = id(obj)
    if marker in active:
        raise ConversionError(
            f"Cyclic reference through {type(obj).__name__} cannot be converted",
            code=ErrorCode.CYCLIC_VALUE,
        )
    active.add(marker)
    try:
        if isinstance(obj, abc.Mapping):
            entries: dict[str, Value] = {}
            for key, item in obj.items():
                if not isinstance(key, str):
                    raise ConversionError(
                        f"Mapping keys must be str, got {type(key).__name__} ({key!r})",
                        code=ErrorCode.KEY_NOT_STRING,
                    )
                entries[key] = _convert(item, active)
            return Mapping(entries)
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return Mapping(
                {f.name: _convert(getattr(obj, f.name), active) for f in dataclasses.fields(obj)}
            )
        if isinstance(obj, (set, frozenset)):
            items = [_convert(item, active) for item in obj]
            return Sequence(tuple(sorted(items, key=_sort_key)))
        if isinstance(obj, abc.Iterable):
            return Sequence(tuple(_convert(item, active) for item in obj))
    finally:
        active.discard(marker)

    if callable(obj):
        return Producer(obj)
    raise ConversionError(f"Cannot convert {type(obj).__name__} to a template value")


def _sort_key(value: Value) -> str:
    return dumps(value)


# =============================================================================
# Serialization
# =============================================================================


def to_python(value: Value) -> Any:
    """Convert a Value back to plain Python data.

    Mapping keys are inserted in lexicographic order; Producers become
    ``None`` since they have no representation outside a render.
    """
    if isinstance(value, Text):
        return value.value
    if isinstance(value, Boolean):
        return value.value
    if isinstance(value, Sequence):
        return [to_python(item) for item in value.items]
    if isinstance(value, Mapping):
        return {key: to_python(item) for key, item in value.sorted_items()}
    return None


def dumps(value: Value, *, pretty: bool = False) -> str:
    """Serialize a Value as JSON text.

    Compact output uses no whitespace; pretty output indents by two spaces.
    Keys are always sorted.

    Example:
        >>> dumps(to_value({"b": True, "a": ["x"]}))
        '{"a":["x"],"b":true}'
    """
    data = to_python(value)
    if pretty:
        return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
