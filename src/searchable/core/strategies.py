"""Execution strategies: How an aspect turns a term into records.

Pattern-match builds a SQL query of OR'd LIKE / equality predicates.
Delegated-index hands the raw term to the record type's search index and
hydrates the hits back into records.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, false, func, inspect, or_, select

from searchable.core.escaping import LIKE_ESCAPE_CHAR, EscapePolicies, escape_like

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from searchable.adapters.base.index import RawResults, SearchIndex
    from searchable.core.calls import DeferredCallQueue
    from searchable.models.attribute import SearchableAttribute

logger = logging.getLogger(__name__)


class ExecutionStrategy(ABC):
    """Runs one search for one record type."""

    name: str

    def __init__(self, record_type: type) -> None:
        self.record_type = record_type

    @abstractmethod
    def execute(
        self,
        session: Session,
        term: str,
        sub_terms: Sequence[str],
        attributes: Sequence[SearchableAttribute],
        calls: DeferredCallQueue[Any],
        limit: int | None,
    ) -> list[Any]:
        """Run the search and return the matched records.

        Args:
            session: Session to query (and hydrate) records with.
            term: The raw search term.
            sub_terms: ``term`` split on whitespace.
            attributes: Attributes to match against; never empty.
            calls: Deferred calls to replay before executing.
            limit: Result cap, or ``None`` for no cap.
        """


class PatternMatchStrategy(ExecutionStrategy):
    """Searches with a single ``SELECT`` against the record type's table.

    A record matches when any attribute matches any sub-term. Partial
    attributes compare lowercased values with an escaped ``LIKE``; exact
    attributes compare the raw sub-term for equality.
    """

    name = "pattern_match"

    def __init__(self, record_type: type, escaping: EscapePolicies | None = None) -> None:
        super().__init__(record_type)
        self.escaping = escaping or EscapePolicies()

    def execute(self, session, term, sub_terms, attributes, calls, limit):
        statement = select(self.record_type).where(self.build_condition(session, sub_terms, attributes))
        statement = calls.replay(statement)
        if limit:
            statement = statement.limit(limit)
        return list(session.scalars(statement).all())

    def build_condition(
        self,
        session: Session,
        sub_terms: Sequence[str],
        attributes: Sequence[SearchableAttribute],
    ) -> ColumnElement[bool]:
        policy = self.escaping.for_bind(session.get_bind())
        predicates: list[ColumnElement[bool]] = []

        for attribute in attributes:
            column = getattr(self.record_type, attribute.name)
            for sub_term in sub_terms:
                if not sub_term:
                    continue
                if attribute.partial:
                    pattern = escape_like(sub_term.lower(), policy)
                    predicates.append(func.lower(column).like(pattern, escape=LIKE_ESCAPE_CHAR))
                else:
                    predicates.append(column == sub_term)

        if not predicates:
            return false()
        return or_(*predicates)


class DelegatedIndexStrategy(ExecutionStrategy):
    """Searches through the record type's external search index.

    The index is restricted to the aspect's attribute names for the search;
    partial/exact is left to the index's own matching rules.
    """

    name = "delegated_index"

    def execute(self, session, term, sub_terms, attributes, calls, limit):
        names = list(dict.fromkeys(attribute.name for attribute in attributes))

        def configure(index: SearchIndex, query: str, options: dict[str, Any]) -> RawResults:
            index.reset_searchable_attributes()
            index.update_searchable_attributes(names)
            logger.debug("Searching %s index on %s", index.name, ", ".join(names))
            return index.search(query, options)

        cursor = self.record_type.search(term, configure)
        cursor = calls.replay(cursor)
        if limit:
            cursor = cursor.take(limit)
        return self.hydrate(session, cursor.get())

    def hydrate(self, session: Session, hits: list[dict[str, Any]]) -> list[Any]:
        """Load the records behind ``hits``, keeping the index's order."""
        key = self.record_type.get_search_key()
        ids = [hit[key] for hit in hits if key in hit]
        if not ids:
            return []

        column = inspect(self.record_type).primary_key[0]
        records = session.scalars(select(self.record_type).where(column.in_(ids))).all()
        by_id = {str(getattr(record, key)): record for record in records}

        missing = len(ids) - len(by_id)
        if missing > 0:
            logger.debug("%d index hit(s) for %s have no matching row", missing, self.record_type.__name__)
        return [by_id[str(id_)] for id_ in ids if str(id_) in by_id]
