"""Convenience entry points: ``render``, ``render_to`` and ``render_text``.

Settings not passed explicitly (escape policy, partial depth limit, parse
delimiters) come from configuration, so ``WHISKER_RENDER__ESCAPE=none`` or a
``WHISKER_CONFIG`` file changes the defaults of every call. The domain configs
are rebuilt whenever the config file or the ``WHISKER_*`` environment changes.
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from .core.config import (
    CONFIG_PATH_ENV,
    RenderConfig,
    TemplateConfig,
    config_fingerprint,
    register_cache_clearer,
)
from .core.render.escaping import Escaper
from .core.render.partials import PartialSource, as_registry
from .core.render.renderer import Renderer
from .core.template.template import Template, TemplateOptions

Partials = Optional[Mapping[str, PartialSource]]
EscapePolicy = Union[str, Escaper, None]


def _config_key() -> str:
    return config_fingerprint(os.environ.get(CONFIG_PATH_ENV) or None)


@lru_cache(maxsize=1)
def _cached_render_config(key: str) -> RenderConfig:
    return RenderConfig()


@lru_cache(maxsize=1)
def _cached_template_config(key: str) -> TemplateConfig:
    return TemplateConfig()


def _render_config() -> RenderConfig:
    return _cached_render_config(_config_key())


def _template_config() -> TemplateConfig:
    return _cached_template_config(_config_key())


def _clear_api_caches() -> None:
    _cached_render_config.cache_clear()
    _cached_template_config.cache_clear()


register_cache_clearer("whisker.api", _clear_api_caches)


def _renderer(partials: Partials, escape: EscapePolicy, options: Optional[TemplateOptions] = None) -> Renderer:
    config = _render_config()
    registry = as_registry(partials, options or _template_config().options)
    return Renderer(
        registry,
        escape=escape if escape is not None else config.escape,
        max_partial_depth=config.max_partial_depth,
    )


def render(
    template: Template,
    data: Any = None,
    partials: Partials = None,
    *,
    escape: EscapePolicy = None,
) -> str:
    """Render ``template`` against ``data`` and return the output.

    Args:
        template: Parsed template
        data: Root context value (mapping, object, scalar or ContextStack)
        partials: PartialRegistry, or a mapping of name -> Template or text
        escape: Escaping policy name or callable (default: ``render.escape``)

    Raises:
        TemplateSyntaxError: If a partial given as text, or a lambda's
            output, fails to parse
    """
    return _renderer(partials, escape).render(template, data)


def render_to(
    stream: Any,
    template: Template,
    data: Any = None,
    partials: Partials = None,
    *,
    escape: EscapePolicy = None,
) -> int:
    """Render into a text or binary stream as output is produced.

    Returns:
        Characters written (bytes for binary streams)

    Raises:
        OSError: Whatever the stream raises; output already written stays written
    """
    return _renderer(partials, escape).render_to(stream, template, data)


def render_text(
    text: str,
    data: Any = None,
    partials: Partials = None,
    *,
    options: Optional[TemplateOptions] = None,
    escape: EscapePolicy = None,
) -> str:
    """Parse ``text`` and render it in one step.

    Raises:
        TemplateSyntaxError: If ``text`` fails to parse
    """
    options = options or _template_config().options
    template = Template.from_text(text, options)
    return _renderer(partials, escape, options).render(template, data)


__all__ = ["render", "render_to", "render_text"]
