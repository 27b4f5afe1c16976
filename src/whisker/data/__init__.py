"""
Whisker data resource helpers.

Bundled configuration defaults and schemas are accessed through
importlib.resources so they resolve the same way from a checkout, a wheel,
or a zip import.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Args:
        subpackage: Name of the data subpackage ("config" or "schemas")
        filename: Optional filename within the subpackage

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/whisker/data/config/defaults.yaml')
    """
    pkg = resources.files("whisker.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


@lru_cache(maxsize=16)
def read_yaml(subpackage: str, filename: str) -> dict[str, Any]:
    """Read and parse a bundled YAML file (cached; treat the result as immutable)."""
    path = get_data_path(subpackage, filename)
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


__all__ = ["get_data_path", "read_yaml"]
