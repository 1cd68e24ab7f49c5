"""Tag scanner — splits template source into literal text and tags.

The scanner is delimiter-aware: a ``{{=<% %>=}}`` tag switches the
delimiters used for everything after it. It also performs standalone-line
detection. A section, inverted section, closing, partial, comment or
delimiter tag that is alone on its line (only spaces/tabs around it) claims
the whole line, newline included, so it leaves no blank line behind.

Example:
    >>> [type(x).__name__ for x in Scanner("Hi {{name}}!").scan()]
    ['Literal', 'Tag', 'Literal']

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from whisker.environment.exceptions import ErrorCode, TemplateSyntaxError

DEFAULT_DELIMITERS = ("{{", "}}")

# Tags that may stand alone on a line
_STANDALONE_KINDS = frozenset({"#", "^", "/", ">", "!", "="})

# Sigils recognised right after the open delimiter
_SIGILS = frozenset({"#", "^", "/", ">", "!", "&"})
_EXTENDED_SIGILS = frozenset({"$", "%"})

_INLINE_WHITESPACE = " \t"


@dataclass(frozen=True, slots=True)
class Literal:
    """Run of literal text."""

    value: str
    lineno: int
    col_offset: int


@dataclass(frozen=True, slots=True)
class Tag:
    """A scanned tag.

    Attributes:
        kind: ``"name"`` for plain interpolation, otherwise the sigil
            (``# ^ / > ! = & {`` and, in extended mode, ``@ $ %``)
        name: Tag content with sigil and surrounding whitespace removed
        text: The tag exactly as written, delimiters included
        start: Offset where the tag's claimed region begins (line start when standalone)
        end: Offset just past the claimed region (past the newline when standalone)
        standalone: Whether the tag claimed its whole line
        indent: Whitespace preceding a standalone tag
        delimiters: Delimiters in force when the tag was read
    """

    kind: str
    name: str
    text: str
    start: int
    end: int
    lineno: int
    col_offset: int
    standalone: bool
    indent: str
    delimiters: tuple[str, str]


class Scanner:
    """Single-pass scanner over template source.

    Thread-Safety:
        Each Scanner holds its own cursor; create one per compile.
    """

    __slots__ = ("_close", "_extended", "_name", "_open", "_pos", "_source")

    def __init__(
        self,
        source: str,
        delimiters: tuple[str, str] = DEFAULT_DELIMITERS,
        *,
        extended: bool = False,
        name: str | None = None,
    ):
        self._source = source
        self._open, self._close = delimiters
        self._extended = extended
        self._name = name
        self._pos = 0

    def scan(self) -> Iterator[Literal | Tag]:
        """Yield literals and tags in source order."""
        source = self._source
        while self._pos < len(source):
            start = source.find(self._open, self._pos)
            if start == -1:
                yield self._literal(self._pos, len(source))
                return

            tag = self._read_tag(start)
            if tag.start > self._pos:
                yield self._literal(self._pos, tag.start)
            self._pos = tag.end
            if tag.kind == "=":
                self._open, self._close = self._parse_delimiters(tag)
            yield tag

    # ------------------------------------------------------------------
    # Tag reading
    # ------------------------------------------------------------------

    def _read_tag(self, start: int) -> Tag:
        source = self._source
        inner_start = start + len(self._open)
        lead = source[inner_start : inner_start + 1]

        if lead == "{":
            closing = "}" + self._close
            inner_start += 1
        elif lead == "=":
            closing = "=" + self._close
            inner_start += 1
        else:
            closing = self._close

        inner_end = source.find(closing, inner_start)
        if inner_end == -1:
            raise self._error(f"Unclosed tag: expected '{closing}'", start, ErrorCode.UNCLOSED_TAG)
        tag_end = inner_end + len(closing)
        content = source[inner_start:inner_end].strip()

        if lead == "{":
            kind, name = "{", content
        elif lead == "=":
            kind, name = "=", content
        elif self._extended and content == "@":
            kind, name = "@", ""
        elif content[:1] in _SIGILS or (self._extended and content[:1] in _EXTENDED_SIGILS):
            kind, name = content[0], content[1:].strip()
        else:
            kind, name = "name", content

        if not name and kind not in ("!", "@"):
            raise self._error("Empty tag", start, ErrorCode.EMPTY_TAG)

        lineno, col = self._location(start)
        region_start, region_end, indent = start, tag_end, ""
        standalone = False
        if kind in _STANDALONE_KINDS:
            bounds = self._standalone_bounds(start, tag_end)
            if bounds is not None:
                standalone = True
                region_start, region_end = bounds
                indent = source[region_start:start]

        return Tag(
            kind=kind,
            name=name,
            text=source[start:tag_end],
            start=region_start,
            end=region_end,
            lineno=lineno,
            col_offset=col,
            standalone=standalone,
            indent=indent,
            delimiters=(self._open, self._close),
        )

    def _standalone_bounds(self, start: int, end: int) -> tuple[int, int] | None:
        """Return the claimed line region if the tag is alone on its line."""
        source = self._source
        line_begin = source.rfind("\n", 0, start) + 1
        # Another tag (or text) earlier on this line since the last cursor stop
        if line_begin < self._pos:
            return None
        if source[line_begin:start].strip(_INLINE_WHITESPACE):
            return None

        newline = source.find("\n", end)
        line_end = len(source) if newline == -1 else newline
        rest = source[end:line_end]
        if rest.rstrip("\r").strip(_INLINE_WHITESPACE):
            return None
        return line_begin, line_end if newline == -1 else newline + 1

    def _parse_delimiters(self, tag: Tag) -> tuple[str, str]:
        parts = tag.name.split()
        if len(parts) != 2 or any("=" in p for p in parts):
            raise TemplateSyntaxError(
                f"Invalid delimiter change {tag.text!r}: expected two delimiters",
                tag.lineno,
                self._name,
                self._source,
                tag.col_offset,
                code=ErrorCode.INVALID_DELIMITERS,
            )
        return parts[0], parts[1]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _literal(self, start: int, end: int) -> Literal:
        lineno, col = self._location(start)
        return Literal(self._source[start:end], lineno, col)

    def _location(self, offset: int) -> tuple[int, int]:
        lineno = self._source.count("\n", 0, offset) + 1
        col = offset - (self._source.rfind("\n", 0, offset) + 1)
        return lineno, col

    def _error(self, message: str, offset: int, code: ErrorCode) -> TemplateSyntaxError:
        lineno, col = self._location(offset)
        return TemplateSyntaxError(message, lineno, self._name, self._source, col, code=code)
