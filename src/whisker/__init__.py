"""Whisker — a Mustache-family template engine for Python.

Logic-light templates: interpolation, sections, inverted sections,
partials, comments, delimiter changes and lambdas, plus an optional
structured-data extension for emitting JSON.

Quickstart:
    >>> from whisker import Environment
    >>> env = Environment()
    >>> template = env.from_string("Hello, {{ name }}!")
    >>> template.render(name="World")
    'Hello, World!'

Partials:
    >>> from whisker import DictLoader, Environment
    >>> env = Environment(loader=DictLoader({"user": "<b>{{name}}</b>"}))
    >>> env.from_string("{{#users}}{{> user}}{{/users}}").render(
    ...     users=[{"name": "ann"}, {"name": "bob"}]
    ... )
    '<b>ann</b><b>bob</b>'

Structured data (extended mode):
    >>> env = Environment(extended=True)
    >>> env.from_string("{{$ config }}").render(config={"debug": True})
    '{"debug":true}'

Architecture:
Template Source → Scanner → Compiler → token tree → Renderer → output

Pipeline stages:
1. **Scanner**: Finds tags, tracks delimiters and standalone lines
2. **Compiler**: Builds the immutable token tree and loads partials
3. **Template**: Wraps the tree with the render() interface
4. **Renderer**: Walks the tree against a stack of context values

Missing data is never an error: absent names, absent partials and
``null`` render as nothing.

Thread-Safety:
Compiled templates are immutable and can be rendered from many threads at
once. Each render gets its own RenderContext. Lambdas carry state and are
guarded: a lambda busy in one thread raises ProducerBusyError in another.

"""

from whisker.environment import (
    ChoiceLoader,
    ConversionError,
    DictLoader,
    EncodingError,
    Environment,
    ErrorCode,
    FunctionLoader,
    IncompleteSectionError,
    LambdaDepthError,
    LambdaExpansionError,
    Loader,
    OutputError,
    ProducerBusyError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    build_source_snippet,
)
from whisker.render_context import (
    RenderContext,
    get_render_context,
    get_render_context_required,
    render_context,
)
from whisker.template import Template
from whisker.utils.html import html_escape
from whisker.values import (
    FALSE,
    NULL,
    TRUE,
    Boolean,
    Mapping,
    Null,
    Producer,
    Sequence,
    Text,
    Value,
    dumps,
    to_python,
    to_value,
)

__version__ = "0.1.0"

__all__ = [
    "FALSE",
    "NULL",
    "TRUE",
    "Boolean",
    "ChoiceLoader",
    "ConversionError",
    "DictLoader",
    "EncodingError",
    "Environment",
    "ErrorCode",
    "FunctionLoader",
    "IncompleteSectionError",
    "LambdaDepthError",
    "LambdaExpansionError",
    "Loader",
    "Mapping",
    "Null",
    "OutputError",
    "Producer",
    "ProducerBusyError",
    "RenderContext",
    "Sequence",
    "SourceSnippet",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Text",
    "Value",
    "__version__",
    "build_source_snippet",
    "dumps",
    "get_render_context",
    "get_render_context_required",
    "html_escape",
    "render_context",
    "to_python",
    "to_value",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'whisker' has no attribute {name!r}")
