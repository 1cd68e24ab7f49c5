"""Terminal color helpers for error diagnostics.

ANSI codes are emitted only when stdout is a TTY, unless overridden by the
``NO_COLOR`` (https://no-color.org/) or ``FORCE_COLOR`` environment variables.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_CODES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}

Style = Literal["bold", "dim", "green", "yellow", "cyan", "bright_red"]

_ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def _detect_color() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLOR = _detect_color()


def supports_color() -> bool:
    """Whether diagnostics are being colorized."""
    return _USE_COLOR


def style(text: str, *styles: Style) -> str:
    """Wrap ``text`` in the given ANSI styles when color is enabled."""
    if not _USE_COLOR or not styles:
        return text
    prefix = "".join(_CODES[s] for s in styles)
    return f"{prefix}{text}{_CODES['reset']}"


def strip_styles(text: str) -> str:
    """Remove ANSI sequences, e.g. before comparing messages in tests."""
    return _ANSI_RE.sub("", text)


def error_code(text: str) -> str:
    return style(text, "bright_red", "bold")


def location(text: str) -> str:
    return style(text, "cyan")


def hint(text: str) -> str:
    return style(text, "green")


def dim_text(text: str) -> str:
    return style(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """Prefix ``message`` with a highlighted error code, when there is one."""
    if code:
        return f"{error_code(code)}: {message}"
    return message


def format_source_line(lineno: int, content: str, *, is_error: bool = False) -> str:
    """Format one numbered source line; the error line gets a ``>`` marker."""
    marker = ">" if is_error else " "
    number = style(f"{marker}{lineno:>3}", "yellow")
    body = style(content, "bright_red") if is_error else dim_text(content)
    return f"{number} | {body}"
