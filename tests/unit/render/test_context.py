"""Tests for context frames and dotted-name resolution."""
from __future__ import annotations

from collections import UserList, deque
from typing import Any

import pytest

from whisker.core.render.context import (
    MISSING,
    ContextFrame,
    ContextStack,
    MappingFrame,
    ObjectFrame,
    ScalarFrame,
    callable_arity,
    coerce_list,
    frame_for,
    resolve,
)


class Person:
    species = "human"

    def __init__(self, name: str) -> None:
        self.name = name

    def greeting(self) -> str:
        return f"hi {self.name}"

    def wrap(self, text: str) -> str:
        return f"<{text}>"


class Upper(ContextFrame):
    """Custom frame offering any name, upper-cased."""

    def lookup(self, name: str):
        return True, name.upper()


# ============================================================================
# Frames
# ============================================================================


class TestFrames:
    def test_frame_for_selects_variant(self) -> None:
        assert isinstance(frame_for({"a": 1}), MappingFrame)
        assert isinstance(frame_for(Person("x")), ObjectFrame)
        assert isinstance(frame_for("text"), ScalarFrame)
        assert isinstance(frame_for([1, 2]), ScalarFrame)
        assert isinstance(frame_for(deque([1])), ScalarFrame)
        assert isinstance(frame_for({"a": 1}.keys()), ScalarFrame)
        custom = Upper(None)
        assert frame_for(custom) is custom

    def test_mapping_frame_offers_falsy_values(self) -> None:
        assert MappingFrame({"a": None}).lookup("a") == (True, None)
        assert MappingFrame({"a": None}).lookup("b") == MISSING

    def test_object_frame_attributes_and_methods(self) -> None:
        frame = ObjectFrame(Person("ann"))
        assert frame.lookup("name") == (True, "ann")
        assert frame.lookup("species") == (True, "human")
        assert frame.lookup("greeting") == (True, "hi ann")
        found, value = frame.lookup("wrap")
        assert found and callable(value)
        assert frame.lookup("missing") == MISSING

    def test_object_frame_hides_dunders(self) -> None:
        assert ObjectFrame(Person("x")).lookup("__class__") == MISSING

    def test_scalar_frame_offers_nothing(self) -> None:
        assert ScalarFrame("abc").lookup("upper") == MISSING


# ============================================================================
# Resolution
# ============================================================================


class TestResolve:
    def test_dotted_lookup(self) -> None:
        stack = ContextStack.of({"a": {"b": {"c": "X"}}})
        assert resolve(stack, "a.b.c") == (True, "X")

    def test_dotted_lookup_missing_leaf(self) -> None:
        stack = ContextStack.of({"a": {"b": {}}})
        assert resolve(stack, "a.b.c") == MISSING

    def test_head_searches_stack_most_local_first(self) -> None:
        stack = ContextStack.of({"name": "outer", "x": 1}, {"name": "inner"})
        assert resolve(stack, "name") == (True, "inner")
        assert resolve(stack, "x") == (True, 1)

    def test_later_segments_do_not_fall_back_to_outer_frames(self) -> None:
        stack = ContextStack.of({"a": {"b": {"c": "outer"}}}, {"a": {"b": {}}})
        assert resolve(stack, "a.b.c") == MISSING

    def test_implicit_iterator_is_top_value(self) -> None:
        stack = ContextStack.of({"k": 1}, "item")
        assert resolve(stack, ".") == (True, "item")
        assert resolve(ContextStack(), ".") == MISSING

    def test_object_path(self) -> None:
        stack = ContextStack.of({"person": Person("bo")})
        assert resolve(stack, "person.greeting") == (True, "hi bo")

    def test_custom_frame(self) -> None:
        stack = ContextStack.of(Upper(None))
        assert resolve(stack, "abc") == (True, "ABC")

    def test_pushed_restores_stack(self) -> None:
        stack = ContextStack.of({"a": 1})
        with stack.pushed({"a": 2}):
            assert resolve(stack, "a") == (True, 2)
            assert len(stack) == 2
        assert resolve(stack, "a") == (True, 1)
        assert len(stack) == 1

    def test_pushed_pops_on_error(self) -> None:
        stack = ContextStack()
        with pytest.raises(RuntimeError):
            with stack.pushed(1):
                raise RuntimeError("boom")
        assert len(stack) == 0


# ============================================================================
# Section coercion and lambda arity
# ============================================================================


class TestCoercion:
    @pytest.mark.parametrize("value", [None, False, 0, "", [], (), {}])
    def test_falsy_values_render_nothing(self, value: Any) -> None:
        assert not coerce_list(True, value)

    def test_missing_renders_nothing(self) -> None:
        assert coerce_list(False, "ignored") == []

    def test_lists_iterate(self) -> None:
        items = [{"n": 1}, {"n": 2}]
        assert coerce_list(True, items) is items

    def test_generators_are_materialised(self) -> None:
        assert coerce_list(True, (i for i in range(3))) == [0, 1, 2]

    @pytest.mark.parametrize(
        "make",
        [
            lambda: deque([1, 2]),
            lambda: UserList([1, 2]),
            lambda: map(int, "12"),
            lambda: iter([1, 2]),
            lambda: {1: "a", 2: "b"}.keys(),
            lambda: {"a": 1, "b": 2}.values(),
        ],
        ids=["deque", "userlist", "map", "iterator", "dict-keys", "dict-values"],
    )
    def test_other_iterables_iterate(self, make) -> None:
        assert list(coerce_list(True, make())) == [1, 2]

    def test_empty_iterator_renders_nothing(self) -> None:
        assert not coerce_list(True, iter([]))

    @pytest.mark.parametrize("value", [True, 1, "x", {"k": "v"}, Person("p")])
    def test_truthy_scalars_become_one_item(self, value: Any) -> None:
        assert coerce_list(True, value) == [value]


class TestCallableArity:
    def test_counts_required_positionals(self) -> None:
        assert callable_arity(lambda: None) == 0
        assert callable_arity(lambda text: None) == 1
        assert callable_arity(lambda text, render: None) == 2
        assert callable_arity(lambda text, render=None: None) == 1
        assert callable_arity(lambda *args: None) == 0

    def test_bound_method_excludes_self(self) -> None:
        assert callable_arity(Person("x").wrap) == 1

    def test_builtin_without_signature(self) -> None:
        arity = callable_arity(dict)
        assert isinstance(arity, int)
