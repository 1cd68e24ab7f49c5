"""Exceptions for the Whisker template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError        # Compile-time error in template source
├── TemplateNotFoundError      # Loader could not provide a template
├── TemplateRuntimeError       # Render-time failure
│   ├── IncompleteSectionError # Compiler left an unfinished section in the tree
│   ├── LambdaExpansionError   # Lambda output failed to compile
│   ├── LambdaDepthError       # Lambda re-expansion nested too deeply
│   ├── ProducerBusyError      # Lambda invoked while already in use
│   └── OutputError            # Output sink rejected a write
├── EncodingError              # Output is not valid UTF-8 text
└── ConversionError            # Host object cannot become a Value

Missing data is never an error: absent names and missing partials render
as empty output.

Example:
    ```
    W-PAR-002: Unclosed section 'items'
      --> page.mustache:3:0
       |
      3 | {{#items}}
       | ^
       |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from whisker.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes for Whisker errors.

    Format: W-{CATEGORY}-{NUMBER}
    Categories: LEX (scanner), PAR (tree building), RUN (rendering),
    TPL (template loading), VAL (value conversion).
    """

    # Scanner errors (W-LEX-xxx)
    UNCLOSED_TAG = "W-LEX-001"
    EMPTY_TAG = "W-LEX-002"
    INVALID_DELIMITERS = "W-LEX-003"

    # Tree building errors (W-PAR-xxx)
    UNMATCHED_SECTION = "W-PAR-001"
    UNCLOSED_SECTION = "W-PAR-002"

    # Runtime errors (W-RUN-xxx)
    RUNTIME_ERROR = "W-RUN-001"
    INCOMPLETE_SECTION = "W-RUN-002"
    LAMBDA_EXPANSION = "W-RUN-003"
    LAMBDA_DEPTH = "W-RUN-004"
    LAMBDA_RESULT = "W-RUN-005"
    PRODUCER_BUSY = "W-RUN-006"
    OUTPUT_FAILED = "W-RUN-007"
    INVALID_ENCODING = "W-RUN-008"
    EXTENSION_DISABLED = "W-RUN-009"

    # Template loading errors (W-TPL-xxx)
    TEMPLATE_NOT_FOUND = "W-TPL-001"
    SYNTAX_ERROR = "W-TPL-002"

    # Value conversion errors (W-VAL-xxx)
    UNSUPPORTED_TYPE = "W-VAL-001"
    KEY_NOT_STRING = "W-VAL-002"
    CYCLIC_VALUE = "W-VAL-003"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
            "VAL": "value",
        }.get(prefix, "unknown")


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format the snippet with numbered lines and an optional caret."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('   |')} {terminal.style(caret, 'bright_red')}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all Whisker errors.

        >>> try:
        ...     template.render(data)
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short, human-readable summary without traceback noise."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{terminal.error_code(self.code.value)}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """Template not found by the environment's loader."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Compile-time error in template source.

    When ``source`` and ``lineno`` are provided, the message includes a
    source snippet with a caret under ``col_offset``.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        loc = self.name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
            if self.col_offset is not None:
                loc += f":{self.col_offset}"
        return loc

    def _format_message(self) -> str:
        header = f"Syntax Error: {self.message}\n  --> {self.location}"
        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, context_lines=0, column=self.col_offset)
            if snippet.lines:
                return f"{header}\n{snippet.format()}"
        return header

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        parts.append(f"  --> {terminal.location(self.location)}")
        if self.source and self.lineno:
            parts.append(build_source_snippet(self.source, self.lineno, column=self.col_offset).format())
        return "\n".join(parts)


class TemplateRuntimeError(TemplateError):
    """Render-time failure.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        tag: Source text of the tag involved, when known
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        tag: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.tag = tag
        self.lineno = lineno
        self.suggestion = suggestion
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.template_name or self.lineno:
            loc = self.template_name or "<template>"
            if self.lineno:
                loc += f":{self.lineno}"
            parts.append(f"  Location: {terminal.location(loc)}")
        if self.tag:
            parts.append(f"  Tag: {self.tag}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        if self.template_name:
            parts.append(f"  Location: {terminal.location(self.template_name)}")
        if self.tag:
            parts.append(f"  Tag: {self.tag}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class IncompleteSectionError(TemplateRuntimeError):
    """An unfinished section sentinel reached the renderer.

    This is a compiler bug, never a data error.
    """

    code: ErrorCode | None = ErrorCode.INCOMPLETE_SECTION


class LambdaExpansionError(TemplateRuntimeError):
    """Template source returned by a lambda failed to compile.

    The original TemplateSyntaxError is available as ``__cause__`` and
    ``syntax_error``.
    """

    code: ErrorCode | None = ErrorCode.LAMBDA_EXPANSION

    def __init__(self, syntax_error: TemplateSyntaxError, **kwargs: object):
        self.syntax_error = syntax_error
        super().__init__(
            f"Lambda output failed to compile: {syntax_error.message}",
            suggestion="Check the template text returned by the lambda",
            **kwargs,  # type: ignore[arg-type]
        )


class LambdaDepthError(TemplateRuntimeError):
    """Lambda re-expansion nested deeper than ``max_lambda_depth``."""

    code: ErrorCode | None = ErrorCode.LAMBDA_DEPTH


class ProducerBusyError(TemplateRuntimeError):
    """A lambda was invoked while another render held its guard.

    Value trees containing lambdas must not be rendered from two threads at
    once; give each concurrent render its own values.
    """

    code: ErrorCode | None = ErrorCode.PRODUCER_BUSY


class OutputError(TemplateRuntimeError):
    """The output sink raised while being written to."""

    code: ErrorCode | None = ErrorCode.OUTPUT_FAILED


class EncodingError(TemplateError):
    """Rendered output cannot be encoded as UTF-8."""

    code: ErrorCode | None = ErrorCode.INVALID_ENCODING


class ConversionError(TemplateError):
    """A host object cannot be converted into a template Value."""

    code: ErrorCode | None = ErrorCode.UNSUPPORTED_TYPE

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)
