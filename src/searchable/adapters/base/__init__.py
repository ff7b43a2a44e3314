"""Base index interface: Abstract classes for search engine connectors."""

from searchable.adapters.base.cursor import IndexCursor
from searchable.adapters.base.index import RawResults, SearchIndex

__all__ = ["IndexCursor", "RawResults", "SearchIndex"]
