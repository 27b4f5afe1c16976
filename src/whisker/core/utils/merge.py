"""Deep merge for layered configuration.

Mappings merge recursively; any other value (lists included) in the
override replaces the base value outright.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def deep_merge(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Recursively merge ``override`` onto ``base`` without mutating either.

    Example:
        >>> deep_merge({"render": {"escape": "html", "max_partial_depth": 64}},
        ...            {"render": {"escape": "none"}})
        {'render': {'escape': 'none', 'max_partial_depth': 64}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


__all__ = ["deep_merge"]
