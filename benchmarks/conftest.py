from __future__ import annotations

import json
import os
import platform
import sys
from pathlib import Path

import pytest

from benchmarks.fixtures.context_large import LARGE_CONTEXT
from benchmarks.fixtures.context_medium import MEDIUM_CONTEXT
from benchmarks.fixtures.templates import TEMPLATES
from whisker import DictLoader, Environment, Template, to_value

try:
    import importlib.metadata as importlib_metadata
except ModuleNotFoundError:  # pragma: no cover
    import importlib_metadata  # type: ignore


BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
            "gil_enabled": getattr(sys, "_is_gil_enabled", lambda: True)(),
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "whisker": _version("whisker"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def whisker_env() -> Environment:
    return Environment(loader=DictLoader(TEMPLATES))


@pytest.fixture(scope="session")
def whisker_env_extended() -> Environment:
    return Environment(loader=DictLoader(TEMPLATES), extended=True)


@pytest.fixture(scope="session")
def medium_template(whisker_env: Environment) -> Template:
    return whisker_env.get_template("medium")


@pytest.fixture(scope="session")
def large_template(whisker_env: Environment) -> Template:
    return whisker_env.get_template("large")


@pytest.fixture(scope="session")
def medium_context() -> dict[str, object]:
    return MEDIUM_CONTEXT


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return LARGE_CONTEXT


@pytest.fixture(scope="session")
def large_value():
    """LARGE_CONTEXT converted once, to benchmark rendering without conversion."""
    return to_value(LARGE_CONTEXT)
