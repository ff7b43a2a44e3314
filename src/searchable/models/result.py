"""Search result models returned by the multi-aspect front."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """A single matched record, normalized for display."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    record: Any = Field(description="The matched record instance")
    title: str = Field(description="Human readable title of the record")
    url: str | None = Field(default=None, description="Link to the record, if it has one")
    type: str | None = Field(default=None, description="Type of the aspect that produced the match")


class SearchResults(BaseModel):
    """Ordered collection of results gathered across aspects."""

    results: list[SearchResult] = Field(default_factory=list)

    def add_results(self, type: str, results: Iterable[SearchResult]) -> None:
        """Append results, stamping each with the aspect type."""
        for result in results:
            self.results.append(result.model_copy(update={"type": type}))

    def group_by_type(self) -> dict[str, list[SearchResult]]:
        grouped: dict[str, list[SearchResult]] = {}
        for result in self.results:
            grouped.setdefault(result.type or "", []).append(result)
        return grouped

    def aspect(self, type: str) -> list[SearchResult]:
        return [result for result in self.results if result.type == type]

    @property
    def records(self) -> list[Any]:
        return [result.record for result in self.results]

    def __iter__(self) -> Iterator[SearchResult]:  # type: ignore[override]
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)
