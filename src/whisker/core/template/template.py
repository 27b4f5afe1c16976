"""Template: a parsed, immutable element tree.

Two entry points are provided:
- ``parse_text`` returns a ``ParseResult`` holding either the template or the
  structured ``LastError``; it never raises for template errors.
- ``Template.from_text`` / ``parse_file`` raise ``TemplateSyntaxError``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from ..exceptions import TemplateNotFoundError, TemplateSyntaxError, WhiskerError
from .elements import DEFAULT_DELIMITERS, Block, Delimiters, Element, Inheritance, Section
from .errors import LastError, ParseFailure
from .parser import Parser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateOptions:
    """Options applied while parsing.

    Attributes:
        delimiters: Initial delimiter pair
        copy_strings: Kept for API parity with borrowing implementations;
            Python strings are always owned by the tree, so this has no effect
            on behavior.
    """

    delimiters: Delimiters = DEFAULT_DELIMITERS
    copy_strings: bool = True


@dataclass(frozen=True)
class Template:
    """A parsed template.

    Immutable once built; safe to render from several threads at once.
    """

    elements: Tuple[Element, ...]
    name: Optional[str] = None
    options: TemplateOptions = field(default_factory=TemplateOptions)

    @classmethod
    def from_text(
        cls,
        text: str,
        options: Optional[TemplateOptions] = None,
        *,
        name: Optional[str] = None,
    ) -> "Template":
        """Parse ``text``, raising ``TemplateSyntaxError`` on failure."""
        result = parse_text(text, options, name=name)
        if result.error is not None:
            raise TemplateSyntaxError(result.error, name=name)
        return result.template  # type: ignore[return-value]

    def walk(self) -> Iterator[Element]:
        """Yield every element of the tree, depth first."""
        pending = list(reversed(self.elements))
        while pending:
            element = pending.pop()
            yield element
            if isinstance(element, (Section, Block, Inheritance)):
                pending.extend(reversed(element.children))

    def __len__(self) -> int:
        return len(self.elements)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of ``parse_text``: exactly one of ``template`` and ``error`` is set."""

    template: Optional[Template] = None
    error: Optional[LastError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Template:
        """Return the template or raise ``TemplateSyntaxError``."""
        if self.error is not None:
            raise TemplateSyntaxError(self.error)
        if self.template is None:
            raise WhiskerError("ParseResult holds neither a template nor an error")
        return self.template


def parse_text(
    text: str,
    options: Optional[TemplateOptions] = None,
    *,
    name: Optional[str] = None,
) -> ParseResult:
    """Parse template text.

    Args:
        text: Template source
        options: Parse options (default delimiters when omitted)
        name: Optional template name, used in logs and error messages

    Returns:
        ParseResult with the template, or with the first parse error
    """
    options = options or TemplateOptions()
    try:
        elements = Parser(text, options.delimiters).parse()
    except ParseFailure as failure:
        err = failure.error
        logger.debug(
            "Template %s failed to parse: %s at %d:%d",
            name or "<text>", err.kind.value, err.row, err.col,
        )
        return ParseResult(error=err)

    logger.debug("Parsed template %s (%d root elements)", name or "<text>", len(elements))
    return ParseResult(template=Template(elements=elements, name=name, options=options))


def parse_file(
    path: Union[str, Path],
    options: Optional[TemplateOptions] = None,
    *,
    name: Optional[str] = None,
    encoding: str = "utf-8",
) -> Template:
    """Read and parse a template file.

    Raises:
        TemplateNotFoundError: If ``path`` does not exist
        TemplateSyntaxError: If the file does not parse
    """
    p = Path(path)
    if not p.is_file():
        raise TemplateNotFoundError(f"Template not found: {p}", context={"path": str(p)})
    return Template.from_text(p.read_text(encoding=encoding), options, name=name or p.stem)


__all__ = ["TemplateOptions", "Template", "ParseResult", "parse_text", "parse_file"]
