"""Rendering: context stack, escaping, output sinks, partials and the renderer."""
from __future__ import annotations

from .context import (
    ContextFrame,
    ContextStack,
    MappingFrame,
    ObjectFrame,
    ScalarFrame,
    coerce_list,
    frame_for,
    resolve,
)
from .escaping import Escaper, escape_html, escape_none, get_escaper, global_escapers, register_escaper
from .partials import PartialRegistry, as_registry
from .renderer import DEFAULT_MAX_PARTIAL_DEPTH, Renderer, RenderState
from .sinks import BufferSink, IndentingSink, Sink, StreamSink

__all__ = [
    # Context
    "ContextFrame",
    "ContextStack",
    "MappingFrame",
    "ObjectFrame",
    "ScalarFrame",
    "coerce_list",
    "frame_for",
    "resolve",
    # Escaping
    "Escaper",
    "escape_html",
    "escape_none",
    "get_escaper",
    "global_escapers",
    "register_escaper",
    # Partials
    "PartialRegistry",
    "as_registry",
    # Renderer
    "DEFAULT_MAX_PARTIAL_DEPTH",
    "Renderer",
    "RenderState",
    # Sinks
    "BufferSink",
    "IndentingSink",
    "Sink",
    "StreamSink",
]
