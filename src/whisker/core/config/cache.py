"""Centralized configuration caching.

One merged config dict is kept per (config file, file mtime, WHISKER_* env)
combination, so domain configs share a single load and pick up changes to
either source on the next access.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

ENV_PREFIX = "WHISKER_"

_config_cache: Dict[str, Dict[str, Any]] = {}
_cache_clearers: Dict[str, Callable[[], None]] = {}


def _normalize_path(config_path: Union[str, Path, None]) -> Optional[Path]:
    if config_path is None or config_path == "":
        return None
    return Path(config_path).expanduser().resolve()


def _cache_key(config_path: Union[str, Path, None]) -> str:
    path = _normalize_path(config_path)
    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith(ENV_PREFIX)
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    file_fp = "none"
    if path is not None:
        try:
            st = path.stat()
            file_fp = f"{st.st_mtime_ns}:{st.st_size}"
        except OSError:
            file_fp = "missing"

    return f"{path or '<defaults>'}:file={file_fp}:env={env_fp}"


def config_fingerprint(config_path: Union[str, Path, None] = None) -> str:
    """Key identifying the config file state and the current WHISKER_* environment."""
    return _cache_key(config_path)


def get_cached_config(
    config_path: Union[str, Path, None] = None,
    validate: bool = False,
) -> Dict[str, Any]:
    """Get the merged configuration, loading it on first use.

    Args:
        config_path: Optional user YAML file layered over the bundled defaults
        validate: Whether to validate a fresh load against the schema

    Returns:
        Configuration dictionary (cached; treat as immutable)
    """
    key = _cache_key(config_path)
    if key not in _config_cache:
        from .manager import ConfigManager

        manager = ConfigManager(config_path=_normalize_path(config_path))
        _config_cache[key] = manager._load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the config cache and every registered derived cache."""
    _config_cache.clear()
    for clearer in list(_cache_clearers.values()):
        clearer()


def register_cache_clearer(name: str, clearer: Callable[[], None]) -> None:
    """Register an additional cache clearer to run inside ``clear_all_caches()``."""
    _cache_clearers[name] = clearer


def is_cached(config_path: Union[str, Path, None] = None) -> bool:
    return _cache_key(config_path) in _config_cache


__all__ = [
    "ENV_PREFIX",
    "config_fingerprint",
    "get_cached_config",
    "clear_all_caches",
    "register_cache_clearer",
    "is_cached",
]
