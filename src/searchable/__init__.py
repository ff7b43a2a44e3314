"""Searchable: Free-text search across SQLAlchemy record types.

A ``SearchAspect`` binds one record type to the attributes that should be
searched. ``Search`` fans a term out to every registered aspect and gathers
the matching records as ``SearchResult`` objects.
"""

from searchable.core.aspect import SearchAspect
from searchable.core.search import Search
from searchable.models.attribute import SearchableAttribute
from searchable.models.record import IndexSearchable, Searchable
from searchable.models.result import SearchResult, SearchResults

__version__ = "0.1.0"

__all__ = [
    "IndexSearchable",
    "Search",
    "SearchAspect",
    "SearchResult",
    "SearchResults",
    "Searchable",
    "SearchableAttribute",
    "__version__",
]
