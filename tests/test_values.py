"""Tests for the Value model, the host adapter and serialization."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal

import pytest

from whisker import (
    FALSE,
    NULL,
    TRUE,
    Boolean,
    ConversionError,
    ErrorCode,
    Mapping,
    Null,
    Producer,
    ProducerBusyError,
    Sequence,
    Text,
    TemplateRuntimeError,
    dumps,
    to_python,
    to_value,
)


@dataclass
class User:
    name: str
    admin: bool = False


class TestToValue:
    """Conversion of plain Python objects."""

    def test_scalars(self) -> None:
        assert to_value(None) is NULL
        assert to_value(True) is TRUE
        assert to_value(False) is FALSE
        assert to_value("hi") == Text("hi")

    def test_numbers_become_text(self) -> None:
        assert to_value(3) == Text("3")
        assert to_value(1.5) == Text("1.5")
        assert to_value(Decimal("1.10")) == Text("1.10")

    def test_value_passes_through(self) -> None:
        value = Text("x")
        assert to_value(value) is value

    def test_mapping(self) -> None:
        value = to_value({"a": "1", "b": [True]})
        assert value == Mapping({"a": Text("1"), "b": Sequence((TRUE,))})

    def test_list_tuple_and_generator(self) -> None:
        expected = Sequence((Text("1"), Text("2")))
        assert to_value([1, 2]) == expected
        assert to_value((1, 2)) == expected
        assert to_value(n for n in (1, 2)) == expected

    def test_set_is_sorted(self) -> None:
        assert to_value({"b", "c", "a"}) == Sequence((Text("a"), Text("b"), Text("c")))

    def test_dataclass_becomes_mapping(self) -> None:
        assert to_value(User("ann")) == Mapping({"name": Text("ann"), "admin": FALSE})

    def test_callable_becomes_producer(self) -> None:
        value = to_value(str.upper)
        assert isinstance(value, Producer)
        assert value.call("abc") == "ABC"

    def test_shared_reference_is_not_a_cycle(self) -> None:
        shared = ["x"]
        value = to_value({"a": shared, "b": shared})
        assert isinstance(value, Mapping)
        assert value.get("a") == value.get("b")

    def test_bytes_rejected(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            to_value({"data": b"raw"})
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_TYPE

    def test_unknown_object_rejected(self) -> None:
        with pytest.raises(ConversionError, match="object"):
            to_value(object())

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            to_value({1: "one"})
        assert exc_info.value.code == ErrorCode.KEY_NOT_STRING

    def test_cycle_rejected(self) -> None:
        items: list[object] = []
        items.append(items)
        with pytest.raises(ConversionError) as exc_info:
            to_value(items)
        assert exc_info.value.code == ErrorCode.CYCLIC_VALUE


class TestEquality:
    """Structural equality and the producer rule."""

    def test_structural_equality(self) -> None:
        assert Null() == NULL
        assert Boolean(True) == TRUE
        assert Text("a") != Text("b")
        assert Text("true") != TRUE
        assert Sequence((Text("a"),)) != Sequence((Text("a"), Text("a")))

    def test_mapping_equality_ignores_insertion_order(self) -> None:
        assert to_value({"a": "1", "b": "2"}) == to_value({"b": "2", "a": "1"})

    def test_producer_never_equal(self, caplog) -> None:
        producer = Producer(str.upper)
        with caplog.at_level(logging.ERROR, logger="whisker.values"):
            assert not (producer == producer)
            assert not (Text("x") == producer)
        assert len(caplog.records) == 2
        assert "Cannot compare lambdas" in caplog.records[0].getMessage()

    def test_producer_nested_in_sequence(self, caplog) -> None:
        producer = Producer(str.upper)
        with caplog.at_level(logging.ERROR, logger="whisker.values"):
            assert Sequence((producer,)) != Sequence((producer,))
        assert caplog.records

    def test_collections_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Sequence(()))
        assert hash(Text("a")) == hash(Text("a"))


class TestProducer:
    """Guarded invocation of lambdas."""

    def test_non_string_result(self) -> None:
        producer = Producer(lambda text: 42)
        with pytest.raises(TemplateRuntimeError) as exc_info:
            producer.call("")
        assert exc_info.value.code == ErrorCode.LAMBDA_RESULT

    def test_busy_in_another_thread(self) -> None:
        entered = threading.Event()
        release = threading.Event()

        def slow(text: str) -> str:
            entered.set()
            release.wait(5)
            return text

        producer = Producer(slow)
        worker = threading.Thread(target=producer.call, args=("x",))
        worker.start()
        try:
            assert entered.wait(5)
            with pytest.raises(ProducerBusyError):
                producer.call("y")
        finally:
            release.set()
            worker.join()

        # Guard released: usable again
        assert producer.call("z") == "z"

    def test_guard_released_after_exception(self) -> None:
        def boom(text: str) -> str:
            raise ValueError("boom")

        producer = Producer(boom)
        with pytest.raises(ValueError):
            producer.call("")
        with pytest.raises(ValueError):
            producer.call("")


class TestSerialization:
    """to_python and dumps."""

    def test_to_python(self) -> None:
        value = to_value({"b": [True, None], "a": "x", "f": str.upper})
        assert to_python(value) == {"a": "x", "b": [True, None], "f": None}
        assert list(to_python(value)) == ["a", "b", "f"]

    def test_dumps_compact(self) -> None:
        value = to_value({"k2": "B", "k1": "A", "v": ["x", True]})
        assert dumps(value) == '{"k1":"A","k2":"B","v":["x",true]}'

    def test_dumps_pretty(self) -> None:
        value = to_value({"b": True, "a": "String"})
        assert dumps(value, pretty=True) == '{\n  "a": "String",\n  "b": true\n}'

    def test_dumps_keeps_non_ascii(self) -> None:
        assert dumps(to_value(["café"])) == '["café"]'
