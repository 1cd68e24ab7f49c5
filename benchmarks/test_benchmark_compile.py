"""Compile benchmarks: scanning and tree building, with and without partials.

Run with: pytest benchmarks/test_benchmark_compile.py --benchmark-only
"""

from __future__ import annotations

import pytest
from pytest_benchmark.fixture import BenchmarkFixture

from benchmarks.fixtures.templates import TEMPLATES
from whisker import Environment
from whisker.compiler import Scanner


@pytest.mark.benchmark(group="compile:scan")
def test_scan_medium(benchmark: BenchmarkFixture) -> None:
    source = TEMPLATES["medium"]

    def scan() -> int:
        return sum(1 for _ in Scanner(source).scan())

    assert benchmark(scan) > 0


@pytest.mark.benchmark(group="compile:tree")
def test_compile_medium_inline(benchmark: BenchmarkFixture) -> None:
    env = Environment()
    benchmark(env.from_string, TEMPLATES["medium"])


@pytest.mark.benchmark(group="compile:tree")
def test_compile_large_with_partials(benchmark: BenchmarkFixture, whisker_env: Environment) -> None:
    template = benchmark(whisker_env.get_template, "large")
    assert "row" in template.partials


@pytest.mark.benchmark(group="compile:delimiters")
def test_compile_delimiter_changes(benchmark: BenchmarkFixture) -> None:
    source = "{{=<% %>=}}<%#a%><%b%><%={{ }}=%>{{/a}}\n" * 200
    env = Environment()
    benchmark(env.from_string, source)
