"""Element tree produced by the parser.

The tree is a closed set of frozen dataclasses. Children are stored as tuples
and every node is built after its children, so a finished tree is immutable
and acyclic.

- StaticText:     literal text, emitted verbatim
- Interpolation:  {{name}}, {{{name}}}, {{&name}}
- Section:        {{#name}}...{{/name}} and {{^name}}...{{/name}}
- Partial:        {{>name}}
- Inheritance:    {{<name}}...{{/name}} (parametric partial)
- Block:          {{$name}}...{{/name}} (overridable region)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

# Key naming the top of the context stack.
IMPLICIT_ITERATOR = "."


@dataclass(frozen=True)
class Delimiters:
    """Open/close tag markers."""

    open: str = "{{"
    close: str = "}}"


DEFAULT_DELIMITERS = Delimiters()


def split_key(key: str) -> Tuple[str, ...]:
    """Split a dotted key into its resolution path.

    The implicit iterator resolves to an empty path (the top of the stack).
    """
    if key == IMPLICIT_ITERATOR:
        return ()
    return tuple(key.split("."))


@dataclass(frozen=True)
class StaticText:
    text: str


@dataclass(frozen=True)
class Interpolation:
    key: str
    escaped: bool = True
    path: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", split_key(self.key))


@dataclass(frozen=True)
class Section:
    """A section or inverted section.

    Attributes:
        key: Name resolved against the context stack
        inverted: Render once when the value is empty instead of per item
        children: Elements between the open and close tags
        raw_body: Unprocessed source text between the tags (handed to lambdas)
        delimiters: Delimiters active at the open tag
    """

    key: str
    inverted: bool = False
    children: Tuple["Element", ...] = ()
    raw_body: str = ""
    delimiters: Delimiters = DEFAULT_DELIMITERS
    path: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", split_key(self.key))


@dataclass(frozen=True)
class Partial:
    """A partial tag; ``indent`` is set only when the tag stood alone on its line."""

    key: str
    indent: Optional[str] = None


@dataclass(frozen=True)
class Block:
    """A named block; ``indent`` is set only when its open tag stood alone on its line."""

    key: str
    children: Tuple["Element", ...] = ()
    indent: Optional[str] = None


@dataclass(frozen=True)
class Inheritance:
    """A parent tag whose children are the block overrides passed to the parent."""

    key: str
    children: Tuple[Block, ...] = ()
    indent: Optional[str] = None

    def overrides(self) -> dict:
        """Return block name -> override block (first definition wins)."""
        result: dict = {}
        for block in self.children:
            result.setdefault(block.key, block)
        return result


Element = Union[StaticText, Interpolation, Section, Partial, Inheritance, Block]


__all__ = [
    "IMPLICIT_ITERATOR",
    "Delimiters",
    "DEFAULT_DELIMITERS",
    "split_key",
    "StaticText",
    "Interpolation",
    "Section",
    "Partial",
    "Block",
    "Inheritance",
    "Element",
]
