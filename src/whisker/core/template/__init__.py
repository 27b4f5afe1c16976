"""Template parsing: scanner, parser, element tree and the Template type.

- elements: Closed set of immutable element variants
- scanner: Tokenizer with delimiter tracking and standalone detection
- parser: Standalone trimming and tree assembly
- template: Template, ParseResult and parse entry points
"""
from __future__ import annotations

from .elements import (
    DEFAULT_DELIMITERS,
    IMPLICIT_ITERATOR,
    Block,
    Delimiters,
    Element,
    Inheritance,
    Interpolation,
    Partial,
    Section,
    StaticText,
)
from .errors import LastError, ParseErrorKind
from .parser import Parser
from .scanner import Scanner, Tag, TagKind, Text
from .template import ParseResult, Template, TemplateOptions, parse_file, parse_text

__all__ = [
    # Elements
    "DEFAULT_DELIMITERS",
    "IMPLICIT_ITERATOR",
    "Block",
    "Delimiters",
    "Element",
    "Inheritance",
    "Interpolation",
    "Partial",
    "Section",
    "StaticText",
    # Errors
    "LastError",
    "ParseErrorKind",
    # Parsing
    "Parser",
    "Scanner",
    "Tag",
    "TagKind",
    "Text",
    "ParseResult",
    "Template",
    "TemplateOptions",
    "parse_file",
    "parse_text",
]
