"""Tests for the deferred call queue."""

from __future__ import annotations

from typing import Any

import pytest

from searchable.core.calls import DeferredCallQueue
from searchable.exceptions import UnsupportedDeferredOperation


class Recorder:
    """Mutates itself in place and returns None."""

    def __init__(self) -> None:
        self.seen: list[tuple[str, tuple[Any, ...]]] = []

    def first(self, *args: Any) -> None:
        self.seen.append(("first", args))

    def second(self, *args: Any) -> None:
        self.seen.append(("second", args))


class Chain:
    """Returns a new instance from every call."""

    def __init__(self, steps: tuple[str, ...] = ()) -> None:
        self.steps = steps

    def step(self, name: str, suffix: str = "") -> "Chain":
        return Chain((*self.steps, name + suffix))

    not_callable = "value"


class TestForward:
    def test_returns_owner(self) -> None:
        owner = object()
        queue = DeferredCallQueue(owner)
        assert queue.forward("anything", 1, 2) is owner

    def test_records_in_order(self) -> None:
        queue = DeferredCallQueue(None)
        queue.forward("a", 1)
        queue.forward("b", key="v")
        calls = list(queue)
        assert [c.method for c in calls] == ["a", "b"]
        assert calls[0].args == (1,)
        assert calls[1].kwargs == {"key": "v"}
        assert len(queue) == 2


class TestReplay:
    def test_in_place_target_is_kept(self) -> None:
        queue = DeferredCallQueue(None)
        queue.forward("second", 2)
        queue.forward("first", 1)
        recorder = Recorder()
        assert queue.replay(recorder) is recorder
        assert recorder.seen == [("second", (2,)), ("first", (1,))]

    def test_returned_target_replaces_current(self) -> None:
        queue = DeferredCallQueue(None)
        queue.forward("step", "a")
        queue.forward("step", "b", suffix="!")
        original = Chain()
        result = queue.replay(original)
        assert original.steps == ()
        assert result.steps == ("a", "b!")

    def test_replay_is_repeatable(self) -> None:
        queue = DeferredCallQueue(None)
        queue.forward("step", "a")
        assert queue.replay(Chain()).steps == ("a",)
        assert queue.replay(Chain()).steps == ("a",)

    def test_empty_queue_returns_target(self) -> None:
        target = Chain()
        assert DeferredCallQueue(None).replay(target) is target

    @pytest.mark.parametrize("method", ["missing", "not_callable", "_private", "__class__"])
    def test_unsupported_method_raises(self, method: str) -> None:
        queue = DeferredCallQueue(None)
        queue.forward(method)
        with pytest.raises(UnsupportedDeferredOperation, match=method) as exc_info:
            queue.replay(Chain())
        assert exc_info.value.method == method
        assert exc_info.value.target_type == "Chain"
