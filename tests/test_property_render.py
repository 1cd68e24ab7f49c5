"""Property-based tests for rendering and serialization."""

from __future__ import annotations

import html
import json

from hypothesis import given, settings
from hypothesis import strategies as st

from whisker import Environment, TemplateSyntaxError, dumps, to_python, to_value

from .strategies import (
    arbitrary_template_source,
    context,
    dotted_name,
    json_data,
    plain_text,
    tag_name,
    text_value,
)

ENV = Environment()
ENV_EXTENDED = Environment(extended=True)


class TestRenderProperties:
    @given(source=plain_text)
    def test_text_without_tags_is_unchanged(self, source: str) -> None:
        assert ENV.from_string(source).render() == source

    @given(value=text_value)
    def test_escaping_is_reversible(self, value: str) -> None:
        rendered = ENV.from_string("{{v}}").render(v=value)
        assert html.unescape(rendered) == value
        assert "<" not in rendered
        assert ">" not in rendered

    @given(value=text_value)
    def test_triple_mustache_is_raw(self, value: str) -> None:
        assert ENV.from_string("{{{v}}}").render(v=value) == value

    @given(name=dotted_name, data=context)
    def test_missing_names_render_empty(self, name: str, data: dict) -> None:
        data.pop(name.split(".")[0], None)
        assert ENV.from_string(f"[{{{{{name}}}}}]").render(data) == "[]"

    @given(name=tag_name, value=json_data)
    def test_inverted_section_follows_falsiness(self, name: str, value) -> None:
        falsy = value is None or value is False or value == []
        result = ENV.from_string(f"{{{{^{name}}}}}Y{{{{/{name}}}}}").render({name: value})
        assert result == ("Y" if falsy else "")

    @given(items=st.lists(text_value, max_size=10))
    def test_section_repeats_per_item(self, items: list[str]) -> None:
        assert ENV.from_string("{{#items}}x{{/items}}").render(items=items) == "x" * len(items)

    @given(source=arbitrary_template_source)
    @settings(max_examples=300)
    def test_arbitrary_input_only_raises_syntax_errors(self, source: str) -> None:
        try:
            template = ENV.from_string(source)
        except TemplateSyntaxError:
            return
        assert isinstance(template.render(), str)


class TestSerializationProperties:
    @given(data=json_data)
    def test_dumps_is_valid_json(self, data) -> None:
        value = to_value(data)
        assert json.loads(dumps(value)) == to_python(value)
        assert json.loads(dumps(value, pretty=True)) == to_python(value)

    @given(
        data=st.one_of(
            st.lists(json_data, max_size=4),
            st.dictionaries(tag_name, json_data, max_size=4),
        )
    )
    def test_json_tag_matches_dumps(self, data) -> None:
        rendered = ENV_EXTENDED.from_string("{{$v}}").render(v=data)
        assert rendered == dumps(to_value(data))
