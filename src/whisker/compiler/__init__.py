"""Whisker compiler — template source to token tree.

Implements the compile contract used by templates and by lambda
re-expansion::

    Compiler(env, source, partials, open_delimiter, close_delimiter).compile()
        -> (tokens, partials)

"""

from whisker.compiler.core import TOP_NAME, Compiler, split_path
from whisker.compiler.scanner import DEFAULT_DELIMITERS, Literal, Scanner, Tag

__all__ = [
    "DEFAULT_DELIMITERS",
    "TOP_NAME",
    "Compiler",
    "Literal",
    "Scanner",
    "Tag",
    "split_path",
]
