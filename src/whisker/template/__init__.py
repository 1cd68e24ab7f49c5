"""Whisker Template package — compiled templates and the renderer.

Re-exports the public symbols so that ``from whisker.template import
Template`` works without reaching into submodules.

"""

from whisker.template.core import Template, TextSink
from whisker.template.engine import Renderer
from whisker.template.helpers import is_falsy, resolve

__all__ = [
    "Renderer",
    "Template",
    "TextSink",
    "is_falsy",
    "resolve",
]
