"""Parser: builds the element tree from scanner tokens.

Parsing runs in three steps:
1. SCAN      - tokenize the text (see scanner.py)
2. TRIM      - drop the whitespace line around every standalone tag,
               capturing the indentation of standalone partial, parent
               and block tags
3. ASSEMBLE  - match open/close tags on an explicit stack and build the
               tree bottom-up

The first error ends the parse; there is no recovery.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .elements import (
    DEFAULT_DELIMITERS,
    Block,
    Delimiters,
    Element,
    Inheritance,
    Interpolation,
    Partial,
    Section,
    StaticText,
)
from .errors import LastError, ParseErrorKind, ParseFailure
from .scanner import OPENING_KINDS, Scanner, Tag, TagKind, Text, Token


Piece = Union[str, Tag]

_OPEN_SIGILS = {
    TagKind.SECTION: "#",
    TagKind.INVERTED: "^",
    TagKind.PARENT: "<",
    TagKind.BLOCK: "$",
}


@dataclass
class _Frame:
    """An open section, parent or block awaiting its close tag."""

    tag: Tag
    indent: Optional[str] = None
    children: List[Element] = field(default_factory=list)


class Parser:
    """Parse template text into a tuple of root elements.

    Usage:
        elements = Parser("{{#items}}{{.}}{{/items}}").parse()
    """

    def __init__(self, text: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> None:
        self.text = text
        self.delimiters = delimiters

    def parse(self) -> Tuple[Element, ...]:
        """Parse the text.

        Returns:
            Root element sequence

        Raises:
            ParseFailure: With the structured error of the first problem found
        """
        tokens = Scanner(self.text, self.delimiters).tokens()
        pieces, indents = self._trim_standalone(tokens)
        return self._assemble(pieces, indents)

    # ------------------------------------------------------------------
    # Standalone trimming
    # ------------------------------------------------------------------

    def _trim_standalone(self, tokens: List[Token]) -> Tuple[List[Piece], Dict[int, str]]:
        """Remove whitespace-only lines that hold a single standalone tag.

        Returns:
            Tuple of (pieces, indents) where pieces are static strings and tags
            in source order, and indents maps a partial, parent or block tag's start
            offset to the leading whitespace removed from its line.
        """
        pieces: List[Piece] = []
        indents: Dict[int, str] = {}
        skip_until = 0

        for token in tokens:
            if isinstance(token, Text):
                start = max(token.start, skip_until)
                if start < token.end:
                    pieces.append(self.text[start:token.end])
                continue

            if token.standalone:
                leading = token.start - token.line_start
                if leading and pieces and isinstance(pieces[-1], str):
                    kept = pieces[-1][: len(pieces[-1]) - leading]
                    if kept:
                        pieces[-1] = kept
                    else:
                        pieces.pop()
                if token.kind in (TagKind.PARTIAL, TagKind.PARENT, TagKind.BLOCK):
                    indents[token.start] = self.text[token.line_start:token.start]
                skip_until = token.line_end
            pieces.append(token)

        return pieces, indents

    # ------------------------------------------------------------------
    # Tree assembly
    # ------------------------------------------------------------------

    def _assemble(self, pieces: List[Piece], indents: Dict[int, str]) -> Tuple[Element, ...]:
        root: List[Element] = []
        stack: List[_Frame] = []

        def append(element: Element) -> None:
            siblings = stack[-1].children if stack else root
            if isinstance(element, StaticText) and siblings and isinstance(siblings[-1], StaticText):
                siblings[-1] = StaticText(siblings[-1].text + element.text)
            else:
                siblings.append(element)

        for piece in pieces:
            if isinstance(piece, str):
                append(StaticText(piece))
                continue

            kind = piece.kind
            if kind in (TagKind.ESCAPED, TagKind.RAW):
                append(Interpolation(piece.key, escaped=kind is TagKind.ESCAPED))
            elif kind is TagKind.PARTIAL:
                append(Partial(piece.key, indent=indents.get(piece.start)))
            elif kind in OPENING_KINDS:
                stack.append(_Frame(tag=piece, indent=indents.get(piece.start)))
            elif kind is TagKind.CLOSE:
                append(self._close(stack, piece))
            # Comments and delimiter changes leave nothing in the tree.

        if stack:
            unclosed = stack[-1].tag
            raise self._failure(
                ParseErrorKind.UNCLOSED_TAG,
                unclosed,
                f"'{_OPEN_SIGILS[unclosed.kind]}{unclosed.key}' is never closed",
            )
        return tuple(root)

    def _close(self, stack: List[_Frame], tag: Tag) -> Element:
        if not stack:
            raise self._failure(
                ParseErrorKind.UNEXPECTED_CLOSE_TAG,
                tag,
                f"'/{tag.key}' has no matching open tag",
            )
        frame = stack[-1]
        if frame.tag.key != tag.key:
            raise self._failure(
                ParseErrorKind.MISMATCHED_TAG,
                tag,
                f"expected '/{frame.tag.key}', found '/{tag.key}'",
            )
        stack.pop()

        opener = frame.tag
        children = tuple(frame.children)
        if opener.kind is TagKind.PARENT:
            # Only block overrides are meaningful inside a parent tag.
            blocks = tuple(child for child in children if isinstance(child, Block))
            return Inheritance(opener.key, children=blocks, indent=frame.indent)
        if opener.kind is TagKind.BLOCK:
            return Block(opener.key, children=children, indent=frame.indent)
        return Section(
            opener.key,
            inverted=opener.kind is TagKind.INVERTED,
            children=children,
            raw_body=self.text[opener.end:tag.start],
            delimiters=opener.delimiters,
        )

    @staticmethod
    def _failure(kind: ParseErrorKind, tag: Tag, detail: str) -> ParseFailure:
        return ParseFailure(LastError(kind=kind, row=tag.row, col=tag.col, detail=detail))


def parse_elements(text: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> Tuple[Element, ...]:
    """Parse ``text`` and return its root elements (raises ``ParseFailure``)."""
    return Parser(text, delimiters).parse()


__all__ = ["Parser", "parse_elements"]
