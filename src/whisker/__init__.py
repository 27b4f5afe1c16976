"""
Whisker - mustache templates for Python

Parse logic-less templates once, render them many times against mappings,
objects or context stacks, with partials, template inheritance, lambdas and
custom delimiters.
"""

from .api import render, render_text, render_to
from .core.config import ConfigManager, RenderConfig, TemplateConfig, clear_all_caches
from .core.exceptions import ConfigurationError, TemplateNotFoundError, TemplateSyntaxError, WhiskerError
from .core.render import ContextFrame, ContextStack, PartialRegistry, Renderer, register_escaper
from .core.template import (
    DEFAULT_DELIMITERS,
    Delimiters,
    LastError,
    ParseErrorKind,
    ParseResult,
    Template,
    TemplateOptions,
    parse_file,
    parse_text,
)

__version__ = "1.0.0"
__all__ = [
    "__version__",
    # Parsing
    "DEFAULT_DELIMITERS",
    "Delimiters",
    "LastError",
    "ParseErrorKind",
    "ParseResult",
    "Template",
    "TemplateOptions",
    "parse_file",
    "parse_text",
    # Rendering
    "ContextFrame",
    "ContextStack",
    "PartialRegistry",
    "Renderer",
    "register_escaper",
    "render",
    "render_text",
    "render_to",
    # Configuration
    "ConfigManager",
    "RenderConfig",
    "TemplateConfig",
    "clear_all_caches",
    # Errors
    "WhiskerError",
    "TemplateSyntaxError",
    "ConfigurationError",
    "TemplateNotFoundError",
]
