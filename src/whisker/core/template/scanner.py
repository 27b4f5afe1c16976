"""Scanner: splits template text into static text runs and tags.

Tags are recognised under the currently active delimiter pair, which a
``{{=<open> <close>=}}`` tag replaces from that point to the end of the text.
Each tag is flagged ``standalone`` when it is the only non-whitespace content
on its source line; the parser uses the flag to trim that line.

Tag kinds (sigil after the open delimiter):
- (none)  escaped interpolation      {{name}}
- { &     raw interpolation          {{{name}}} {{&name}}
- # ^     section / inverted section {{#name}} {{^name}}
- /       close                      {{/name}}
- >       partial                    {{>name}}
- <       parent (inheritance)       {{<name}}
- $       block                      {{$name}}
- !       comment                    {{! text }}
- =       set delimiters             {{=<% %>=}}
"""
from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from .elements import DEFAULT_DELIMITERS, Delimiters
from .errors import LastError, ParseErrorKind, ParseFailure


class TagKind(str, Enum):
    ESCAPED = "escaped"
    RAW = "raw"
    SECTION = "section"
    INVERTED = "inverted"
    CLOSE = "close"
    PARTIAL = "partial"
    PARENT = "parent"
    BLOCK = "block"
    COMMENT = "comment"
    DELIMITERS = "delimiters"


_SIGILS = {
    "#": TagKind.SECTION,
    "^": TagKind.INVERTED,
    "/": TagKind.CLOSE,
    ">": TagKind.PARTIAL,
    "<": TagKind.PARENT,
    "$": TagKind.BLOCK,
    "!": TagKind.COMMENT,
    "&": TagKind.RAW,
    "{": TagKind.RAW,
    "=": TagKind.DELIMITERS,
}

# Interpolations never stand alone.
STANDALONE_KINDS = frozenset(
    {
        TagKind.SECTION,
        TagKind.INVERTED,
        TagKind.CLOSE,
        TagKind.PARTIAL,
        TagKind.PARENT,
        TagKind.BLOCK,
        TagKind.COMMENT,
        TagKind.DELIMITERS,
    }
)

OPENING_KINDS = frozenset({TagKind.SECTION, TagKind.INVERTED, TagKind.PARENT, TagKind.BLOCK})


@dataclass(frozen=True)
class Text:
    """A run of static text, ``source[start:end]``."""

    start: int
    end: int


@dataclass(frozen=True)
class Tag:
    """A tag occurrence.

    Attributes:
        kind: Tag kind derived from the sigil
        key: Stripped tag content (comment text for comments)
        row: 1-based source row of the open delimiter
        col: 1-based source column of the open delimiter
        start: Offset of the open delimiter
        end: Offset just past the close delimiter
        delimiters: Delimiters in effect when the tag was read
        standalone: Tag is alone on its line (whitespace aside)
        line_start: Offset of the first character of the tag's line
        line_end: Offset just past the line terminator that follows the tag
            (or end of input); only meaningful when standalone
        new_delimiters: Replacement pair declared by a set-delimiter tag
    """

    kind: TagKind
    key: str
    row: int
    col: int
    start: int
    end: int
    delimiters: Delimiters
    standalone: bool = False
    line_start: int = 0
    line_end: int = 0
    new_delimiters: Optional[Delimiters] = None


Token = Union[Text, Tag]


def _is_blank(segment: str) -> bool:
    return segment.strip(" \t") == ""


class Scanner:
    """Tokenize template text under a changeable delimiter pair.

    Usage:
        scanner = Scanner("Hello {{name}}!")
        for token in scanner.scan():
            ...
    """

    def __init__(self, text: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> None:
        self.text = text
        self.delimiters = delimiters
        self._newlines = [i for i, ch in enumerate(text) if ch == "\n"]

    def position(self, offset: int) -> Tuple[int, int]:
        """Return the 1-based (row, col) of ``offset``."""
        row = bisect.bisect_left(self._newlines, offset)
        line_start = self._newlines[row - 1] + 1 if row else 0
        return row + 1, offset - line_start + 1

    def scan(self) -> Iterator[Token]:
        """Yield tokens in source order.

        Raises:
            ParseFailure: On an unterminated tag, a malformed delimiter
                declaration or an empty/invalid key.
        """
        text = self.text
        pos = 0
        while pos < len(text):
            start = text.find(self.delimiters.open, pos)
            if start == -1:
                yield Text(pos, len(text))
                return
            if start > pos:
                yield Text(pos, start)
            tag = self._read_tag(start)
            if tag.new_delimiters is not None:
                self.delimiters = tag.new_delimiters
            yield tag
            pos = tag.end

    def tokens(self) -> List[Token]:
        return list(self.scan())

    def _fail(self, kind: ParseErrorKind, offset: int, detail: Optional[str] = None) -> ParseFailure:
        row, col = self.position(offset)
        return ParseFailure(LastError(kind=kind, row=row, col=col, detail=detail))

    def _read_tag(self, start: int) -> Tag:
        text = self.text
        delimiters = self.delimiters
        inner = start + len(delimiters.open)
        sigil = text[inner:inner + 1]
        kind = _SIGILS.get(sigil, TagKind.ESCAPED)

        # {{{name}}} and {{=a b=}} carry a matching character before the close delimiter.
        if sigil == "{":
            closing = "}" + delimiters.close
        elif sigil == "=":
            closing = "=" + delimiters.close
        else:
            closing = delimiters.close

        body_start = inner if kind is TagKind.ESCAPED else inner + 1
        body_end = text.find(closing, body_start)
        if body_end == -1:
            raise self._fail(
                ParseErrorKind.UNTERMINATED_TAG,
                start,
                f"missing '{closing}' for tag opened with '{delimiters.open}'",
            )
        end = body_end + len(closing)
        body = text[body_start:body_end]
        row, col = self.position(start)

        new_delimiters = None
        if kind is TagKind.COMMENT:
            key = body.strip()
        elif kind is TagKind.DELIMITERS:
            new_delimiters = self._parse_delimiters(body, start)
            key = body.strip()
        else:
            key = body.strip()
            if not key or any(ch.isspace() for ch in key):
                raise self._fail(
                    ParseErrorKind.EMPTY_OR_INVALID_KEY,
                    start,
                    f"invalid key {body!r}" if key else "empty key",
                )

        standalone = False
        line_start = text.rfind("\n", 0, start) + 1
        line_end = end
        if kind in STANDALONE_KINDS and _is_blank(text[line_start:start]):
            newline = text.find("\n", end)
            rest_end = len(text) if newline == -1 else newline
            rest = text[end:rest_end]
            if rest.endswith("\r"):
                rest = rest[:-1]
            if _is_blank(rest):
                standalone = True
                line_end = len(text) if newline == -1 else newline + 1

        return Tag(
            kind=kind,
            key=key,
            row=row,
            col=col,
            start=start,
            end=end,
            delimiters=delimiters,
            standalone=standalone,
            line_start=line_start,
            line_end=line_end,
            new_delimiters=new_delimiters,
        )

    def _parse_delimiters(self, body: str, start: int) -> Delimiters:
        parts = body.split()
        if len(parts) != 2 or any("=" in part for part in parts):
            raise self._fail(
                ParseErrorKind.INVALID_DELIMITER_DECLARATION,
                start,
                f"expected two whitespace-separated delimiters, got {body.strip()!r}",
            )
        return Delimiters(open=parts[0], close=parts[1])


__all__ = [
    "TagKind",
    "STANDALONE_KINDS",
    "OPENING_KINDS",
    "Text",
    "Tag",
    "Token",
    "Scanner",
]
