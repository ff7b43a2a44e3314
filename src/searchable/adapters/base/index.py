"""Base search index: Abstract interface for external full-text engines.

A search index is the handle that ``IndexSearchable`` record types delegate
their searches to. It is responsible for:
  1. Narrowing the set of attributes a query is matched against
  2. Executing a query with backend-neutral options

Options passed to ``search()`` use these keys:
  - ``where``: list of ``(field, value)`` equality filters
  - ``where_in``: list of ``(field, values)`` membership filters
  - ``sort``: list of ``(field, direction)`` pairs
  - ``limit``: maximum number of hits, or ``None`` for the index maximum
Any other key is passed through to the backend untouched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class RawResults(BaseModel):
    """Raw hits from an index before they are hydrated into records."""

    documents: list[dict[str, Any]] = Field(default_factory=list, description="Raw hit dicts, in rank order")


class SearchIndex(ABC):
    """Abstract base class for search index clients.

    One instance talks to one index. Instances are synchronous and are not
    meant to be shared between threads while their settings are changing.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'meilisearch')."""

    @abstractmethod
    def reset_searchable_attributes(self) -> None:
        """Restore the index's default searchable attribute set."""

    @abstractmethod
    def update_searchable_attributes(self, attributes: list[str]) -> None:
        """Restrict matching to ``attributes``, in priority order."""

    @abstractmethod
    def search(self, query: str, options: dict[str, Any]) -> RawResults:
        """Execute a search query against the index.

        Args:
            query: The raw search term.
            options: Backend-neutral search options (see module docstring).

        Returns:
            Raw hits from the backend.
        """

    def close(self) -> None:
        """Release any connections held by the client."""
