"""Escaping policies for ``{{name}}`` interpolations.

A policy is any ``Callable[[str], str]``. Policies are registered by name so
configuration can select one (``render.escape: html``):

    @register_escaper("shout")
    def shout(text: str) -> str:
        return text.upper()

Raw interpolations (``{{{name}}}``, ``{{&name}}``) bypass the policy.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Union

from ..exceptions import ConfigurationError

Escaper = Callable[[str], str]

DEFAULT_ESCAPE = "html"

_HTML_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
    }
)


def escape_html(text: str) -> str:
    """Escape ``& < > "`` for HTML text and attribute contexts."""
    return text.translate(_HTML_ESCAPE_TABLE)


def escape_none(text: str) -> str:
    return text


class EscaperRegistry:
    """Named escaping policies."""

    def __init__(self) -> None:
        self._escapers: Dict[str, Escaper] = {}

    def register(self, name: str) -> Callable[[Escaper], Escaper]:
        """Decorator to register a policy under ``name``."""
        def decorator(func: Escaper) -> Escaper:
            self._escapers[name] = func
            return func
        return decorator

    def add(self, name: str, func: Escaper) -> None:
        self._escapers[name] = func

    def get(self, name: str) -> Optional[Escaper]:
        return self._escapers.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._escapers

    def list_escapers(self) -> List[str]:
        return sorted(self._escapers)


global_escapers = EscaperRegistry()
global_escapers.add("html", escape_html)
global_escapers.add("none", escape_none)


def register_escaper(name: str) -> Callable[[Escaper], Escaper]:
    """Register a policy in the global registry."""
    return global_escapers.register(name)


def get_escaper(policy: Union[str, Escaper, None] = None) -> Escaper:
    """Resolve a policy name or callable to an escaper.

    Args:
        policy: Registered policy name, a callable, or None for the default

    Raises:
        ConfigurationError: If ``policy`` names no registered escaper
    """
    if policy is None:
        policy = DEFAULT_ESCAPE
    if callable(policy):
        return policy
    escaper = global_escapers.get(policy)
    if escaper is None:
        raise ConfigurationError(
            f"Unknown escape policy '{policy}'",
            context={"policy": policy, "available": global_escapers.list_escapers()},
        )
    return escaper


__all__ = [
    "Escaper",
    "DEFAULT_ESCAPE",
    "escape_html",
    "escape_none",
    "EscaperRegistry",
    "global_escapers",
    "register_escaper",
    "get_escaper",
]
