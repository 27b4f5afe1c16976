"""Domain config accessors."""
from .render import RenderConfig
from .template import TemplateConfig

__all__ = ["RenderConfig", "TemplateConfig"]
