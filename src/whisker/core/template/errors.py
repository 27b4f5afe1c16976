"""Parse error taxonomy."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ParseErrorKind(str, Enum):
    """Kinds of parse failure. The first error encountered ends the parse."""

    UNTERMINATED_TAG = "UnterminatedTag"
    INVALID_DELIMITER_DECLARATION = "InvalidDelimiterDeclaration"
    EMPTY_OR_INVALID_KEY = "EmptyOrInvalidKey"
    MISMATCHED_TAG = "MismatchedTag"
    UNCLOSED_TAG = "UnclosedTag"
    UNEXPECTED_CLOSE_TAG = "UnexpectedCloseTag"


@dataclass(frozen=True)
class LastError:
    """Structured parse error: kind plus 1-based row/col of the offending tag."""

    kind: ParseErrorKind
    row: int
    col: int
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"kind": self.kind.value, "row": self.row, "col": self.col}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class ParseFailure(Exception):
    """Internal signal raised by the scanner and parser; converted to ``LastError``."""

    def __init__(self, error: LastError) -> None:
        super().__init__(error.kind.value)
        self.error = error


__all__ = ["ParseErrorKind", "LastError", "ParseFailure"]
