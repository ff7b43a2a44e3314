"""Search: Runs one term against every registered aspect.

Results come back in registration order, aspect by aspect, each wrapped in
the ``SearchResult`` the record describes itself with. No ranking or
deduplication is applied across aspects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from searchable.core.aspect import SearchAspect
from searchable.core.escaping import EscapePolicies
from searchable.models.result import SearchResults

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from searchable.config.settings import Settings

logger = logging.getLogger(__name__)


class Search:
    """Registry of search aspects keyed by their type label.

    Example:
        >>> search = Search()
        >>> search.register_record_type(Article, "title", "body")
        >>> search.register_record_type(Author, lambda aspect: aspect.add_exact_searchable_attribute("email"))
        >>> results = search.perform("ada")
    """

    def __init__(
        self,
        *,
        session_factory: sessionmaker[Session] | None = None,
        escaping: EscapePolicies | None = None,
        limit_aspect_results: int | None = None,
    ) -> None:
        self._aspects: dict[str, SearchAspect] = {}
        self._session_factory = session_factory
        self._escaping = escaping
        self._limit_aspect_results = limit_aspect_results

    @classmethod
    def from_settings(cls, settings: Settings, session_factory: sessionmaker[Session] | None = None) -> Search:
        return cls(
            session_factory=session_factory,
            escaping=EscapePolicies.from_settings(settings.search),
            limit_aspect_results=settings.search.default_limit,
        )

    def register_aspect(self, aspect: SearchAspect) -> Search:
        if aspect.type in self._aspects:
            logger.warning("Overwriting existing aspect registration: %s", aspect.type)
        self._aspects[aspect.type] = aspect
        return self

    def register_record_type(self, record_type: type, *attributes: Any) -> Search:
        """Create and register an aspect for ``record_type``.

        ``attributes`` are names, or a single list of names, or a single
        configurator callable.
        """
        spec: Any = list(attributes)
        if len(attributes) == 1 and (callable(attributes[0]) or isinstance(attributes[0], list | tuple)):
            spec = attributes[0]
        aspect = SearchAspect(
            record_type,
            spec,
            session_factory=self._session_factory,
            escaping=self._escaping,
        )
        return self.register_aspect(aspect)

    def limit_aspect_results(self, limit: int) -> Search:
        """Cap the number of results taken from each aspect."""
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        self._limit_aspect_results = limit
        return self

    @property
    def aspects(self) -> dict[str, SearchAspect]:
        return dict(self._aspects)

    def perform(self, term: str, session: Session | None = None) -> SearchResults:
        """Search every registered aspect for ``term``."""
        results = SearchResults()
        for type_, aspect in self._aspects.items():
            if self._limit_aspect_results:
                aspect.set_limit(self._limit_aspect_results)
            records = aspect.get_results(term, session=session)
            results.add_results(type_, (record.get_search_result() for record in records))
        logger.info("Search for %d-character term returned %d result(s)", len(term), len(results))
        return results
