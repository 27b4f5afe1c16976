"""Parse settings (``template`` section)."""
from __future__ import annotations

from functools import cached_property

from ...template.elements import DEFAULT_DELIMITERS, Delimiters
from ...template.template import TemplateOptions
from ..base import BaseDomainConfig


class TemplateConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "template"

    @cached_property
    def delimiters(self) -> Delimiters:
        raw = self.section.get("delimiters") or {}
        return Delimiters(
            open=str(raw.get("open", DEFAULT_DELIMITERS.open)),
            close=str(raw.get("close", DEFAULT_DELIMITERS.close)),
        )

    @cached_property
    def copy_strings(self) -> bool:
        return bool(self.section.get("copy_strings", True))

    @cached_property
    def options(self) -> TemplateOptions:
        """Parse options built from this section."""
        return TemplateOptions(delimiters=self.delimiters, copy_strings=self.copy_strings)


__all__ = ["TemplateConfig"]
