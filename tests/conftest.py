"""Pytest configuration and fixtures for Whisker tests."""

import pytest

from whisker import DictLoader, Environment
from whisker.environment import terminal


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch):
    """Keep error messages free of ANSI codes regardless of the test runner's TTY."""
    monkeypatch.setattr(terminal, "_USE_COLOR", False)


@pytest.fixture
def env():
    """Create a basic Whisker Environment."""
    return Environment()


@pytest.fixture
def env_extended():
    """Create an Environment with the structured-data extension enabled."""
    return Environment(extended=True)


@pytest.fixture
def env_with_loader():
    """Create a Whisker Environment with DictLoader and test partials."""
    loader = DictLoader(
        {
            "page": "<h1>{{title}}</h1>\n{{> footer}}",
            "footer": "<footer>{{site}}</footer>",
            "item": "<li>{{name}}</li>",
            "list": "<ul>\n  {{> rows}}\n</ul>\n",
            "rows": "{{#items}}\n<li>{{.}}</li>\n{{/items}}\n",
            "tree": "{{name}}({{#children}}{{> tree}}{{/children}})",
        }
    )
    return Environment(loader=loader)
