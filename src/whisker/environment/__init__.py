"""Whisker environment — configuration, loaders and errors.

Exceptions are imported first: every other Whisker module depends on them.

"""

from whisker.environment.exceptions import (
    ConversionError,
    EncodingError,
    ErrorCode,
    IncompleteSectionError,
    LambdaDepthError,
    LambdaExpansionError,
    OutputError,
    ProducerBusyError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    build_source_snippet,
)
from whisker.environment.loaders import ChoiceLoader, DictLoader, FunctionLoader, Loader
from whisker.environment.core import Environment

__all__ = [
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
    "OutputError",
    "ProducerBusyError",
    "SourceSnippet",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "build_source_snippet",
]
