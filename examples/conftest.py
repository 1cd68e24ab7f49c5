"""Shared pytest configuration for whisker examples.

``example_app`` executes the ``app.py`` next to the test in a fresh module,
so lambdas with counters start from zero in every test. Loading it inside
``caplog`` also checks that the example renders cleanly: a tag that hits a
collection, or any other warning from the ``whisker`` loggers, fails the
test instead of quietly rendering nothing.
"""

import importlib.util
import logging
from pathlib import Path

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest, caplog: pytest.LogCaptureFixture):
    """Load a fresh module from the sibling app.py next to the test file."""
    app_path = Path(request.path).parent / "app.py"
    spec = importlib.util.spec_from_file_location(f"whisker_example_{app_path.parent.name}", app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    with caplog.at_level(logging.WARNING, logger="whisker"):
        spec.loader.exec_module(module)
    noisy = [r.getMessage() for r in caplog.records if r.name.startswith("whisker")]
    assert not noisy, f"{app_path.parent.name}/app.py logged: {noisy}"
    return module
