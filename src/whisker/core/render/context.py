"""Context stack and name resolution.

Host data is reached only through ``ContextFrame.lookup``. Built-in frames
cover mappings, plain objects (attributes and zero-argument methods) and
scalars; callers may pass their own ``ContextFrame`` subclasses as data.

Name resolution for ``head.rest1.rest2``:
1. ``head`` is looked up in every frame, most-local first; the first frame
   offering it supplies the value.
2. Each remaining segment is looked up only in the value produced by the
   previous step. Any failed segment makes the whole name missing.
"""
from __future__ import annotations

import inspect
from collections.abc import Iterable
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Sequence, Tuple

from ..template.elements import split_key

Lookup = Tuple[bool, Any]

MISSING: Lookup = (False, None)

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, type(None))


def callable_arity(func: Any) -> int:
    """Number of required positional parameters of ``func``, or -1 if unknown."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return -1
    required = 0
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.default is param.empty and param.kind is not param.KEYWORD_ONLY:
            required += 1
    return required


class ContextFrame:
    """One layer of the context stack.

    Subclasses implement ``lookup``; ``value`` is what ``{{.}}`` yields while
    the frame is on top of the stack.
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def lookup(self, name: str) -> Lookup:
        """Return ``(True, value)`` when this frame offers ``name``, else ``(False, None)``."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"


class MappingFrame(ContextFrame):
    """Frame over a mapping; membership decides whether the name is offered."""

    def lookup(self, name: str) -> Lookup:
        try:
            if name in self.value:
                return True, self.value[name]
        except TypeError:
            pass
        return MISSING


class ObjectFrame(ContextFrame):
    """Frame over an arbitrary object.

    Attributes are offered as-is; bound methods taking no arguments are called
    and their result offered instead. Dunder names are never offered.
    """

    def lookup(self, name: str) -> Lookup:
        if name.startswith("__"):
            return MISSING
        try:
            attr = getattr(self.value, name)
        except AttributeError:
            return MISSING
        if inspect.ismethod(attr) and callable_arity(attr) == 0:
            return True, attr()
        return True, attr


class ScalarFrame(ContextFrame):
    """Frame over a string, number, boolean, None or list-like value: offers no names."""

    def lookup(self, name: str) -> Lookup:
        return MISSING


def frame_for(value: Any) -> ContextFrame:
    """Wrap ``value`` in the frame matching its capabilities."""
    if isinstance(value, ContextFrame):
        return value
    if isinstance(value, Mapping):
        return MappingFrame(value)
    if isinstance(value, _SCALAR_TYPES) or is_list_like(value):
        return ScalarFrame(value)
    return ObjectFrame(value)


def is_list_like(value: Any) -> bool:
    """Any iterable other than text, bytes, mappings and context frames."""
    if isinstance(value, (str, bytes, bytearray, Mapping, ContextFrame)):
        return False
    return isinstance(value, Iterable)


def coerce_list(found: bool, value: Any) -> Sequence[Any]:
    """Coerce a resolved section value to the list of items to render.

    Missing or falsy values give ``[]``; lists and tuples are returned
    unchanged and other iterables (iterators, views, deques) are materialised;
    any other truthy value becomes a single-item list.
    """
    if not found:
        return []
    if is_list_like(value):
        return value if isinstance(value, (list, tuple)) else list(value)
    if isinstance(value, ContextFrame):
        return [value]
    return [value] if value else []


class ContextStack:
    """Ordered stack of context frames; the most recently pushed frame is most local."""

    def __init__(self, values: Sequence[Any] = ()) -> None:
        self._frames: List[ContextFrame] = [frame_for(value) for value in values]

    @classmethod
    def of(cls, *values: Any) -> "ContextStack":
        """Build a stack from least-local to most-local values."""
        return cls(values)

    def copy(self) -> "ContextStack":
        """Return a new stack over the same frames."""
        return ContextStack(self._frames)

    def push(self, value: Any) -> None:
        self._frames.append(frame_for(value))

    def pop(self) -> ContextFrame:
        return self._frames.pop()

    @contextmanager
    def pushed(self, value: Any) -> Iterator["ContextStack"]:
        """Push ``value`` for the duration of a ``with`` block."""
        self.push(value)
        try:
            yield self
        finally:
            self.pop()

    @property
    def top(self) -> Any:
        """Value of the most-local frame (``None`` for an empty stack)."""
        return self._frames[-1].value if self._frames else None

    def frames(self) -> Iterator[ContextFrame]:
        """Iterate frames most-local first."""
        return reversed(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def resolve(self, path: Sequence[str]) -> Lookup:
        """Resolve a split key against the stack.

        Args:
            path: Key segments; empty for the implicit iterator ``.``

        Returns:
            ``(True, value)`` on success, ``(False, None)`` when missing
        """
        if not path:
            if not self._frames:
                return MISSING
            return True, self._frames[-1].value

        head = path[0]
        for frame in self.frames():
            found, value = frame.lookup(head)
            if found:
                break
        else:
            return MISSING

        for segment in path[1:]:
            found, value = frame_for(value).lookup(segment)
            if not found:
                return MISSING
        return True, value


def resolve(stack: ContextStack, key: str) -> Lookup:
    """Resolve a dotted ``key`` (or ``.``) against ``stack``."""
    return stack.resolve(split_key(key))


__all__ = [
    "Lookup",
    "MISSING",
    "callable_arity",
    "ContextFrame",
    "MappingFrame",
    "ObjectFrame",
    "ScalarFrame",
    "frame_for",
    "is_list_like",
    "coerce_list",
    "ContextStack",
    "resolve",
]
