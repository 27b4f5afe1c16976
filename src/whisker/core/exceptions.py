from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping

if TYPE_CHECKING:
    from .template.errors import LastError


class WhiskerError(Exception):
    """Base exception for the whisker template engine."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class TemplateSyntaxError(WhiskerError, ValueError):
    """Raised when template text cannot be parsed.

    Wraps the structured ``LastError`` produced by the parser so callers that
    prefer exceptions still get kind, row and column.
    """

    def __init__(self, error: "LastError", *, name: str | None = None) -> None:
        ctx: Dict[str, Any] = {
            "kind": error.kind.value,
            "row": error.row,
            "col": error.col,
        }
        if error.detail:
            ctx["detail"] = error.detail
        if name:
            ctx["template"] = name
        where = f"{name}:" if name else "line "
        message = f"{error.kind.value} at {where}{error.row}:{error.col}"
        if error.detail:
            message = f"{message}: {error.detail}"
        WhiskerError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.error = error

    @property
    def kind(self):
        return self.error.kind

    @property
    def row(self) -> int:
        return self.error.row

    @property
    def col(self) -> int:
        return self.error.col


class ConfigurationError(WhiskerError, ValueError):
    """Raised when configuration is missing, malformed or fails schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        WhiskerError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class TemplateNotFoundError(WhiskerError, FileNotFoundError):
    """Raised when a template file requested by path does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        WhiskerError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


__all__ = [
    "WhiskerError",
    "TemplateSyntaxError",
    "ConfigurationError",
    "TemplateNotFoundError",
]
