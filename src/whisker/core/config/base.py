"""Base class for domain-specific configuration accessors.

A domain config reads one top-level section of the merged configuration:

    class RenderConfig(BaseDomainConfig):
        def _config_section(self) -> str:
            return "render"

        @cached_property
        def escape(self) -> str:
            return str(self.section.get("escape", "html"))
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Typed, cached view over one config section."""

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize domain config.

        Args:
            config_path: Optional user YAML file (default: ``$WHISKER_CONFIG``)
            config: Already-merged config dict; skips loading when given
        """
        if config is None:
            config = ConfigManager(config_path).load_config(validate=True)
        self._config = config

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """This domain's section, or an empty dict when absent."""
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
