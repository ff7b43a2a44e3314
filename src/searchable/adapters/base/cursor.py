"""Index cursor: Lazy, immutable query against a ``SearchIndex``.

Every refinement returns a new cursor, so a cursor can be shared and
refined without affecting the original. Nothing is sent to the backend
until ``get()`` or ``raw()`` is called.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from searchable.adapters.base.index import RawResults, SearchIndex

ConfigureCallback = Callable[["SearchIndex", str, dict[str, Any]], "RawResults"]


class IndexCursor:
    """Pending search against an index.

    Args:
        index: The index to search.
        query: The raw search term.
        callback: Optional hook called as ``callback(index, query, options)``
            in place of ``index.search(query, options)``. It may reconfigure
            the index before searching and must return the raw results.
        extra_options: Backend-specific options passed through as-is.
    """

    def __init__(
        self,
        index: SearchIndex,
        query: str,
        callback: ConfigureCallback | None = None,
        *,
        wheres: tuple[tuple[str, Any], ...] = (),
        where_ins: tuple[tuple[str, tuple[Any, ...]], ...] = (),
        orders: tuple[tuple[str, str], ...] = (),
        limit: int | None = None,
        extra_options: dict[str, Any] | None = None,
    ) -> None:
        self.index = index
        self.query = query
        self.callback = callback
        self.wheres = wheres
        self.where_ins = where_ins
        self.orders = orders
        self.limit = limit
        self.extra_options = dict(extra_options or {})

    def _replace(self, **changes: Any) -> IndexCursor:
        state: dict[str, Any] = {
            "wheres": self.wheres,
            "where_ins": self.where_ins,
            "orders": self.orders,
            "limit": self.limit,
            "extra_options": self.extra_options,
        }
        state.update(changes)
        return IndexCursor(self.index, self.query, self.callback, **state)

    # ── Refinements ──────────────────────────────────────────────────────

    def where(self, field: str, value: Any) -> IndexCursor:
        return self._replace(wheres=(*self.wheres, (field, value)))

    def where_in(self, field: str, values: Sequence[Any]) -> IndexCursor:
        return self._replace(where_ins=(*self.where_ins, (field, tuple(values))))

    def order_by(self, field: str, direction: str = "asc") -> IndexCursor:
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"Order direction must be 'asc' or 'desc', got {direction!r}")
        return self._replace(orders=(*self.orders, (field, direction)))

    def order_by_desc(self, field: str) -> IndexCursor:
        return self.order_by(field, "desc")

    def take(self, limit: int) -> IndexCursor:
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        return self._replace(limit=limit)

    def options(self, **options: Any) -> IndexCursor:
        return self._replace(extra_options={**self.extra_options, **options})

    # ── Execution ────────────────────────────────────────────────────────

    def build_options(self) -> dict[str, Any]:
        return {
            **self.extra_options,
            "where": list(self.wheres),
            "where_in": [(field, list(values)) for field, values in self.where_ins],
            "sort": list(self.orders),
            "limit": self.limit,
        }

    def raw(self) -> RawResults:
        """Run the search and return the backend's raw results."""
        options = self.build_options()
        if self.callback is not None:
            return self.callback(self.index, self.query, options)
        return self.index.search(self.query, options)

    def get(self) -> list[dict[str, Any]]:
        """Run the search and return the hits in rank order."""
        hits = self.raw().documents
        if self.limit is not None:
            hits = hits[: self.limit]
        return hits
