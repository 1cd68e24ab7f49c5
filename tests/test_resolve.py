"""Tests for path resolution and falsiness helpers."""

from __future__ import annotations

import pytest

from whisker import FALSE, NULL, TRUE, Mapping, Sequence, Text, to_value
from whisker.template.helpers import is_falsy, resolve


class TestResolve:
    """Lookup of dotted paths against the context stack."""

    def test_empty_path_is_innermost_frame(self) -> None:
        stack = [to_value({"a": "1"}), Text("item")]
        assert resolve((), stack) == Text("item")

    def test_empty_path_on_empty_stack(self) -> None:
        assert resolve((), []) is None

    def test_innermost_mapping_wins(self) -> None:
        stack = [to_value({"name": "outer"}), to_value({"name": "inner"})]
        assert resolve(("name",), stack) == Text("inner")

    def test_falls_back_to_outer_frames(self) -> None:
        stack = [to_value({"site": "example"}), to_value({"name": "inner"})]
        assert resolve(("site",), stack) == Text("example")

    def test_non_mapping_frames_are_skipped(self) -> None:
        stack = [to_value({"name": "root"}), Text("scalar"), to_value(["a"])]
        assert resolve(("name",), stack) == Text("root")

    def test_dotted_path(self) -> None:
        stack = [to_value({"a": {"b": {"c": "deep"}}})]
        assert resolve(("a", "b", "c"), stack) == Text("deep")

    def test_head_binds_to_innermost_match_only(self) -> None:
        # "b" is found in the inner frame; the outer "b.c" is not consulted
        stack = [to_value({"b": {"c": "outer"}}), to_value({"b": {}})]
        assert resolve(("b", "c"), stack) is None

    @pytest.mark.parametrize(
        "path",
        [("missing",), ("a", "missing"), ("a", "b", "c", "d"), ("s", "x"), ("list", "0")],
    )
    def test_failures_resolve_to_none(self, path: tuple[str, ...]) -> None:
        stack = [to_value({"a": {"b": {"c": "x"}}, "s": "text", "list": ["zero"]})]
        assert resolve(path, stack) is None

    def test_null_value_is_returned(self) -> None:
        stack = [to_value({"nothing": None})]
        assert resolve(("nothing",), stack) == NULL


class TestIsFalsy:
    """The falsy set for inverted sections."""

    @pytest.mark.parametrize("value", [None, NULL, FALSE, Sequence(())])
    def test_falsy(self, value) -> None:
        assert is_falsy(value)

    @pytest.mark.parametrize(
        "value",
        [TRUE, Text(""), Text("0"), Mapping({}), Sequence((FALSE,))],
    )
    def test_truthy(self, value) -> None:
        assert not is_falsy(value)
