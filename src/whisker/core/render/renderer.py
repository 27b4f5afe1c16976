"""Renderer: walks an element tree against a context stack.

Element handling:
- StaticText:     written verbatim
- Interpolation:  resolved, stringified, escaped unless raw; missing -> nothing
- Section:        resolved value coerced to a list; children rendered once
                  per item with the item pushed (inverted: once iff empty)
- Partial:        named template rendered against the current stack
- Inheritance:    named template rendered with this tag's blocks as overrides
- Block:          override content when one is in effect, else its defaults;
                  a standalone block re-indents its override to its own line

Callable values are lambdas. An interpolated lambda is called with no
arguments; a section lambda receives the raw section text (and, when it takes
two arguments, a function rendering text against the current context). Their
string results are parsed and rendered in place.

Render state lives in a per-call ``RenderState``; a ``Renderer`` and the
templates it renders are never mutated, so both can be shared across threads.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Sequence, Union

from ..exceptions import TemplateSyntaxError
from ..template.elements import (
    DEFAULT_DELIMITERS,
    Block,
    Delimiters,
    Element,
    Inheritance,
    Interpolation,
    Partial,
    Section,
    StaticText,
)
from ..template.errors import ParseFailure
from ..template.parser import Parser
from ..template.template import Template
from .context import ContextFrame, ContextStack, callable_arity, coerce_list
from .escaping import Escaper, get_escaper
from .sinks import BufferSink, IndentingSink, Sink, StreamSink

if TYPE_CHECKING:
    from ..config.domains.render import RenderConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_PARTIAL_DEPTH = 64


@dataclass(frozen=True)
class RenderState:
    """State of one render call; nested renders derive copies with ``replace``."""

    stack: ContextStack
    sink: Sink
    overrides: Mapping[str, Block] = field(default_factory=dict)
    depth: int = 0


def _is_lambda(value: Any) -> bool:
    return callable(value) and not isinstance(value, (type, ContextFrame))


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


class Renderer:
    """Render templates against data.

    Usage:
        renderer = Renderer(partials={"user": user_template})
        text = renderer.render(template, {"name": "World"})
    """

    def __init__(
        self,
        partials: Optional[Mapping[str, Template]] = None,
        *,
        escape: Union[str, Escaper, None] = None,
        max_partial_depth: int = DEFAULT_MAX_PARTIAL_DEPTH,
    ) -> None:
        """Initialize the renderer.

        Args:
            partials: Name -> Template registry for partial and parent tags
            escape: Escaping policy name or callable (default: html)
            max_partial_depth: Nesting limit for partial/parent expansion
        """
        self.partials: Mapping[str, Template] = partials if partials is not None else {}
        self.escape: Escaper = get_escaper(escape)
        self.max_partial_depth = max_partial_depth

    @classmethod
    def from_config(
        cls,
        partials: Optional[Mapping[str, Template]] = None,
        config: Optional["RenderConfig"] = None,
    ) -> "Renderer":
        """Build a renderer from the ``render`` configuration section."""
        if config is None:
            from ..config.domains.render import RenderConfig

            config = RenderConfig()
        return cls(partials, escape=config.escape, max_partial_depth=config.max_partial_depth)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render(self, template: Template, data: Any = None) -> str:
        """Render to a new string."""
        sink = BufferSink()
        self.render_into(sink, template, data)
        return sink.getvalue()

    def render_to(self, stream: Any, template: Template, data: Any = None) -> int:
        """Render to a text or binary stream.

        Returns:
            Characters written (bytes for binary streams)
        """
        return self.render_into(StreamSink(stream), template, data)

    def render_into(self, sink: Sink, template: Template, data: Any = None) -> int:
        """Render into ``sink`` and return its write count."""
        state = RenderState(stack=self._initial_stack(data), sink=sink)
        self._render_elements(template.elements, state)
        return sink.written

    @staticmethod
    def _initial_stack(data: Any) -> ContextStack:
        if isinstance(data, ContextStack):
            return data.copy()
        if data is None:
            return ContextStack()
        return ContextStack([data])

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def _render_elements(self, elements: Sequence[Element], state: RenderState) -> None:
        for element in elements:
            self._render_element(element, state)

    def _render_element(self, element: Element, state: RenderState) -> None:
        if isinstance(element, StaticText):
            state.sink.write_static(element.text)
        elif isinstance(element, Interpolation):
            self._render_interpolation(element, state)
        elif isinstance(element, Section):
            self._render_section(element, state)
        elif isinstance(element, Partial):
            self._render_partial(element, state)
        elif isinstance(element, Inheritance):
            self._render_inheritance(element, state)
        elif isinstance(element, Block):
            self._render_block(element, state)
        else:
            raise TypeError(f"Unknown element type: {type(element).__name__}")

    def _render_interpolation(self, element: Interpolation, state: RenderState) -> None:
        found, value = state.stack.resolve(element.path)
        if not found:
            return
        if _is_lambda(value):
            if callable_arity(value) > 0:
                logger.debug("Lambda '%s' takes arguments; interpolating nothing", element.key)
                return
            text = self._render_string(_stringify(value()), DEFAULT_DELIMITERS, state)
        else:
            text = _stringify(value)
        if element.escaped:
            text = self.escape(text)
        state.sink.write(text)

    def _render_section(self, element: Section, state: RenderState) -> None:
        found, value = state.stack.resolve(element.path)
        if found and not element.inverted and _is_lambda(value):
            if callable_arity(value) != 0:
                self._render_section_lambda(element, value, state)
                return
            value = value()

        items = coerce_list(found, value)
        if element.inverted:
            if not items:
                self._render_elements(element.children, state)
            return

        for item in items:
            with state.stack.pushed(item):
                self._render_elements(element.children, state)

    def _render_section_lambda(self, element: Section, func: Callable[..., Any], state: RenderState) -> None:
        if callable_arity(func) >= 2:
            def render_text(text: str) -> str:
                return self._render_string(text, element.delimiters, state)

            result = func(element.raw_body, render_text)
        else:
            result = func(element.raw_body)
        state.sink.write(self._render_string(_stringify(result), element.delimiters, state))

    def _render_partial(self, element: Partial, state: RenderState) -> None:
        template = self._lookup(element.key)
        if template is None:
            return
        self._expand(template, element.indent, state.overrides, state)

    def _render_inheritance(self, element: Inheritance, state: RenderState) -> None:
        template = self._lookup(element.key)
        if template is None:
            return
        # Overrides already in effect come from further out and take precedence.
        overrides = dict(element.overrides())
        overrides.update(state.overrides)
        self._expand(template, element.indent, overrides, state)

    def _render_block(self, element: Block, state: RenderState) -> None:
        override = state.overrides.get(element.key)
        if override is None:
            self._render_elements(element.children, state)
            return
        remaining = {name: block for name, block in state.overrides.items() if name != element.key}
        sink = state.sink
        if element.indent is not None:
            sink = IndentingSink(sink, element.indent, dedent=override.indent or "")
        self._render_elements(override.children, replace(state, sink=sink, overrides=remaining))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lookup(self, name: str) -> Optional[Template]:
        template = self.partials.get(name)
        if template is None:
            logger.debug("Partial '%s' not found; rendering nothing", name)
        return template

    def _expand(
        self,
        template: Template,
        indent: Optional[str],
        overrides: Mapping[str, Block],
        state: RenderState,
    ) -> None:
        if state.depth >= self.max_partial_depth:
            logger.warning(
                "Partial '%s' not expanded: nesting depth %d reached",
                template.name or "<anonymous>",
                self.max_partial_depth,
            )
            return
        sink = IndentingSink(state.sink, indent) if indent else state.sink
        self._render_elements(
            template.elements,
            replace(state, sink=sink, overrides=overrides, depth=state.depth + 1),
        )

    def _render_string(self, text: str, delimiters: Delimiters, state: RenderState) -> str:
        """Parse lambda output with ``delimiters`` and render it against the current stack."""
        try:
            elements = Parser(text, delimiters).parse()
        except ParseFailure as failure:
            raise TemplateSyntaxError(failure.error, name="<lambda>") from None
        sink = BufferSink()
        self._render_elements(elements, replace(state, sink=sink))
        return sink.getvalue()


__all__ = ["Renderer", "RenderState", "DEFAULT_MAX_PARTIAL_DEPTH"]
