"""Record type capabilities.

A record type is a SQLAlchemy mapped class. Mixing in ``Searchable`` makes it
eligible for a ``SearchAspect``; mixing in ``IndexSearchable`` instead routes
its searches through an external search index rather than a LIKE query.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect

from searchable.adapters.base.cursor import ConfigureCallback, IndexCursor
from searchable.exceptions import ConfigurationError

if TYPE_CHECKING:
    from searchable.adapters.base.index import SearchIndex
    from searchable.models.result import SearchResult


class Searchable:
    """Mixin for mapped classes that can be searched.

    Subclasses may set ``searchable_type`` to override the label results are
    grouped under; it defaults to the mapped table name.
    """

    searchable_type = None
    uses_search_index = False

    @classmethod
    def get_searchable_type(cls) -> str:
        if cls.searchable_type:
            return cls.searchable_type
        return inspect(cls).persist_selectable.name

    def get_search_result(self) -> SearchResult:
        """Describe this record as a search result.

        Required override: every searchable record type must implement this
        for ``Search.perform`` to collect it. ``DeclarativeBase`` carries its
        own metaclass, so the mixin cannot be an ``ABC``.
        """
        raise NotImplementedError(f"{type(self).__name__} must implement get_search_result()")


class IndexSearchable(Searchable):
    """Mixin for mapped classes whose searches are delegated to a search index.

    Bind the index at wiring time::

        Article.search_index = MeiliSearchIndex("articles", base_url=...)
    """

    uses_search_index = True
    search_index = None

    @classmethod
    def searchable_using(cls) -> SearchIndex:
        if cls.search_index is None:
            raise ConfigurationError(f"No search index is bound to `{cls.__qualname__}`.")
        return cls.search_index

    @classmethod
    def get_search_key(cls) -> str:
        """Name of the attribute that index hits are keyed by (the primary key)."""
        mapper = inspect(cls)
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    @classmethod
    def search(cls, query: str = "", callback: ConfigureCallback | None = None, **options: Any) -> IndexCursor:
        """Start a lazy search against the bound index."""
        return IndexCursor(cls.searchable_using(), query, callback=callback, extra_options=options)
