"""Search aspect: One record type, the attributes to search, and how.

An aspect is configured once, usually while the application is being wired,
and then asked for results any number of times::

    aspect = (
        SearchAspect(Article, ["title", "body"])
        .add_exact_searchable_attribute("isbn")
        .refine("order_by", Article.published_at.desc())
    )
    aspect.set_limit(20)
    articles = aspect.get_results("solar nowcasting")

Record types mixing in ``IndexSearchable`` are searched through their
search index; every other ``Searchable`` record type gets a ``LIKE`` query.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable

from searchable.core.calls import DeferredCallQueue
from searchable.core.strategies import DelegatedIndexStrategy, ExecutionStrategy, PatternMatchStrategy
from searchable.db import get_session_factory
from searchable.exceptions import InvalidSearchableRecordType, NoSearchableAttributesConfigured
from searchable.models.attribute import SearchableAttribute
from searchable.models.record import Searchable

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from searchable.core.escaping import EscapePolicies

logger = logging.getLogger(__name__)

AttributeSpec = str | SearchableAttribute
Configurator = Callable[["SearchAspect"], Any]

_WHITESPACE = re.compile(r"\s")


def split_term(term: str) -> list[str]:
    """Split a term on each whitespace character.

    Runs of whitespace produce empty sub-terms, which match nothing.
    """
    return _WHITESPACE.split(term)


class SearchAspect:
    """Searches one record type.

    Args:
        record_type: A mapped class mixing in ``Searchable``.
        attributes: Attribute names (or ``SearchableAttribute`` objects), a
            single name, or a callable invoked once with the new aspect to
            configure it.
        session_factory: Factory for the per-search session. Defaults to
            the one set with ``searchable.db.set_session_factory``.
        escaping: LIKE escape policies for pattern-match searches.

    Raises:
        InvalidSearchableRecordType: If ``record_type`` is not a mapped class
            with a primary key, or does not mix in ``Searchable``.
    """

    def __init__(
        self,
        record_type: type,
        attributes: Sequence[AttributeSpec] | AttributeSpec | Configurator | None = None,
        *,
        session_factory: sessionmaker[Session] | None = None,
        escaping: EscapePolicies | None = None,
    ) -> None:
        self._check_record_type(record_type)

        self.record_type = record_type
        self.attributes: list[SearchableAttribute] = []
        self.limit: int | None = None
        self.deferred_calls: DeferredCallQueue[SearchAspect] = DeferredCallQueue(self)
        self._session_factory = session_factory

        self.strategy: ExecutionStrategy
        if record_type.uses_search_index:
            self.strategy = DelegatedIndexStrategy(record_type)
        else:
            self.strategy = PatternMatchStrategy(record_type, escaping)

        if attributes is None:
            return
        if isinstance(attributes, str | SearchableAttribute):
            self._add(attributes)
        elif callable(attributes):
            attributes(self)
        else:
            for attribute in attributes:
                self._add(attribute)

    @classmethod
    def for_record_type(cls, record_type: type, *attributes: AttributeSpec) -> SearchAspect:
        return cls(record_type, list(attributes))

    @staticmethod
    def _check_record_type(record_type: Any) -> None:
        try:
            mapper = inspect(record_type)
        except NoInspectionAvailable:
            mapper = None
        is_record_type = isinstance(record_type, type) and getattr(mapper, "is_mapper", False)
        if not is_record_type or not mapper.primary_key:
            raise InvalidSearchableRecordType.not_a_record_type(record_type)
        if not issubclass(record_type, Searchable):
            raise InvalidSearchableRecordType.not_searchable(record_type)

    def _add(self, attribute: AttributeSpec) -> None:
        if isinstance(attribute, str):
            attribute = SearchableAttribute.create(attribute)
        self.attributes.append(attribute)

    # ── Configuration ────────────────────────────────────────────────────

    def add_searchable_attribute(self, name: str, partial: bool = True) -> SearchAspect:
        self.attributes.append(SearchableAttribute.create(name, partial))
        return self

    def add_exact_searchable_attribute(self, name: str) -> SearchAspect:
        self.attributes.append(SearchableAttribute.create_exact(name))
        return self

    def set_limit(self, limit: int) -> SearchAspect:
        """Cap the number of records a search returns."""
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        self.limit = limit
        return self

    limit_results = set_limit

    def refine(self, method: str, *args: Any, **kwargs: Any) -> SearchAspect:
        """Queue a builder call to apply to every search.

        ``method`` is called on the SQLAlchemy ``Select`` for pattern-match
        searches, or on the ``IndexCursor`` for delegated-index searches,
        after the search predicates are in place and before the limit.
        """
        return self.deferred_calls.forward(method, *args, **kwargs)

    @property
    def type(self) -> str:
        return self.record_type.get_searchable_type()

    @property
    def uses_delegated_index(self) -> bool:
        return isinstance(self.strategy, DelegatedIndexStrategy)

    @property
    def session_factory(self) -> sessionmaker[Session]:
        return self._session_factory or get_session_factory()

    # ── Search ───────────────────────────────────────────────────────────

    def get_results(self, term: str, session: Session | None = None) -> list[Any]:
        """Return the records matching ``term``.

        Args:
            term: Free-text search term.
            session: Session to run in. When omitted a session is opened
                from the session factory and closed before returning.

        Raises:
            NoSearchableAttributesConfigured: If the aspect has no attributes.
            UnsupportedDeferredOperation: If a refinement names a method the
                query does not have.
        """
        if not self.attributes:
            raise NoSearchableAttributesConfigured.for_record_type(self.record_type)

        sub_terms = split_term(term)

        if session is not None:
            records = self._execute(session, term, sub_terms)
        else:
            with self.session_factory() as owned:
                records = self._execute(owned, term, sub_terms)

        logger.debug(
            "Searched %s via %s: %d sub-term(s), %d record(s)",
            self.type,
            self.strategy.name,
            len(sub_terms),
            len(records),
        )
        return records

    def _execute(self, session: Session, term: str, sub_terms: list[str]) -> list[Any]:
        return self.strategy.execute(
            session,
            term,
            sub_terms,
            list(self.attributes),
            self.deferred_calls,
            self.limit,
        )

    def __repr__(self) -> str:
        return f"SearchAspect({self.record_type.__name__}, strategy={self.strategy.name!r})"
