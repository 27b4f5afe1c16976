"""Render settings (``render`` section)."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional, Union

from ...render.escaping import DEFAULT_ESCAPE
from ...render.partials import DEFAULT_SUFFIX, PartialRegistry
from ...render.renderer import DEFAULT_MAX_PARTIAL_DEPTH
from ...template.template import TemplateOptions
from ..base import BaseDomainConfig


class RenderConfig(BaseDomainConfig):
    """Escaping policy, partial nesting limit and partial file suffix."""

    def _config_section(self) -> str:
        return "render"

    @cached_property
    def escape(self) -> str:
        return str(self.section.get("escape", DEFAULT_ESCAPE))

    @cached_property
    def max_partial_depth(self) -> int:
        return int(self.section.get("max_partial_depth", DEFAULT_MAX_PARTIAL_DEPTH))

    @cached_property
    def partial_suffix(self) -> str:
        return str(self.section.get("partial_suffix", DEFAULT_SUFFIX))

    def load_partials(
        self,
        directory: Union[str, Path],
        options: Optional[TemplateOptions] = None,
    ) -> PartialRegistry:
        """Load a partials directory using the configured file suffix."""
        return PartialRegistry.from_directory(directory, suffix=self.partial_suffix, options=options)


__all__ = ["RenderConfig"]
