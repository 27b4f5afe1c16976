"""
Whisker configuration management (YAML + jsonschema + environment overrides).
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import jsonschema
import yaml

from ...data import get_data_path, read_yaml
from ..exceptions import ConfigurationError
from ..utils.merge import deep_merge
from .cache import ENV_PREFIX, get_cached_config

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = f"{ENV_PREFIX}CONFIG"


class ConfigManager:
    """Load, merge, and validate Whisker configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: WHISKER_* (``WHISKER_RENDER__ESCAPE=none``)
    2. User config file: ``config_path`` argument, else ``$WHISKER_CONFIG``
    3. Bundled defaults: whisker.data/config/defaults.yaml

    Env keys split into path segments on ``__`` (or on ``_`` when no ``__``
    is present) and are matched case-insensitively. Values are coerced to
    bool, int, float or JSON where they parse as one, else kept as strings.
    """

    def __init__(self, config_path: Union[str, Path, None] = None) -> None:
        if config_path is None:
            env_path = os.environ.get(CONFIG_PATH_ENV)
            config_path = env_path or None
        self.config_path: Optional[Path] = Path(config_path) if config_path else None
        self.defaults_path = get_data_path("config", "defaults.yaml")

    # ========== Loading ==========

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        """Read a user config file. Missing or malformed files are errors."""
        if not path.is_file():
            raise ConfigurationError(
                f"Config file not found: {path}", context={"path": str(path)}
            )
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Invalid YAML in {path}: {exc}", context={"path": str(path)}
            ) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path), "type": type(data).__name__},
            )
        return data

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Merge defaults, user file and env overrides (UNCACHED).

        Args:
            validate: If True, validate against the bundled JSON schema

        Returns:
            Merged configuration dictionary
        """
        cfg = copy.deepcopy(read_yaml("config", "defaults.yaml"))
        sources = [str(self.defaults_path)]

        if self.config_path is not None:
            cfg = deep_merge(cfg, self.load_yaml(self.config_path))
            sources.append(str(self.config_path))

        applied = self.apply_env_overrides(cfg, strict=validate)
        if applied:
            sources.append(f"{applied} {ENV_PREFIX}* override(s)")

        logger.debug("Loaded config from %s", ", ".join(sources))

        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration through the central cache.

        The returned dict is shared; treat it as immutable.

        Raises:
            ConfigurationError: If a source is unreadable or the merged
                config fails schema validation
        """
        cfg = get_cached_config(config_path=self.config_path, validate=False)
        if validate:
            # Re-parse env keys strictly so malformed overrides are reported.
            list(self._iter_env_overrides(strict=True))
            self.validate_schema(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> ConfigManager().get("render.escape")
            'html'
            >>> ConfigManager().get("render.nonexistent", "fallback")
            'fallback'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    # ========== Validation ==========

    def validate_schema(self, config: Dict[str, Any]) -> None:
        """Validate ``config`` against ``config.schema.yaml``.

        Raises:
            ConfigurationError: On the first schema violation
        """
        schema = read_yaml("schemas", "config.schema.yaml")
        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as exc:
            location = ".".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigurationError(
                f"Invalid configuration at '{location}': {exc.message}",
                context={"path": location, "source": str(self.config_path or self.defaults_path)},
            ) from exc

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[str]:
        segs = raw.split("__") if "__" in raw else raw.split("_")
        if any(seg == "" for seg in segs):
            if strict:
                raise ConfigurationError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'",
                    context={"key": f"{ENV_PREFIX}{raw}"},
                )
            return []
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_PATH_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                continue
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            keys = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            use_key = keys.get(part, part)
            nxt = cur.get(use_key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[use_key] = nxt
            cur = nxt
        keys = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
        cur[keys.get(path[-1], path[-1])] = value

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> int:
        """Apply WHISKER_* overrides to ``cfg`` in place; returns how many were applied."""
        count = 0
        for path, typed_value in self._iter_env_overrides(strict=strict):
            self._set_nested(cfg, path, typed_value)
            count += 1
        return count


__all__ = ["ConfigManager", "CONFIG_PATH_ENV"]
