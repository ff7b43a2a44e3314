"""Deferred call queue."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from searchable.exceptions import UnsupportedDeferredOperation
from searchable.models.call import DeferredCall

logger = logging.getLogger(__name__)

OwnerT = TypeVar("OwnerT")
TargetT = TypeVar("TargetT")


class DeferredCallQueue(Generic[OwnerT]):
    """Builder calls recorded now and replayed against a live query later.

    Calls replay in the order they were queued. A call that returns ``None``
    is assumed to have changed its target in place; any other return value
    replaces the target for the calls that follow.
    """

    def __init__(self, owner: OwnerT) -> None:
        self._owner = owner
        self._calls: list[DeferredCall] = []

    def forward(self, method: str, *args: Any, **kwargs: Any) -> OwnerT:
        self._calls.append(DeferredCall(method=method, args=args, kwargs=kwargs))
        return self._owner

    def replay(self, target: TargetT) -> TargetT:
        for call in self._calls:
            bound = getattr(target, call.method, None)
            if call.method.startswith("_") or not callable(bound):
                raise UnsupportedDeferredOperation(call.method, target)
            logger.debug("Replaying %s() on %s", call.method, type(target).__name__)
            result = bound(*call.args, **call.kwargs)
            if result is not None:
                target = result
        return target

    def __iter__(self) -> Iterator[DeferredCall]:
        return iter(list(self._calls))

    def __len__(self) -> int:
        return len(self._calls)
