"""Library exceptions."""

from __future__ import annotations

from typing import Any


class SearchableError(Exception):
    """Base exception for searchable errors."""


class ConfigurationError(SearchableError):
    """Raised when the library is used before it has been wired up."""


class InvalidSearchableRecordType(SearchableError):
    """Raised when a class cannot back a search aspect."""

    @classmethod
    def not_a_record_type(cls, record_type: Any) -> InvalidSearchableRecordType:
        return cls(f"`{_name(record_type)}` is not a mapped record type with a primary key.")

    @classmethod
    def not_searchable(cls, record_type: Any) -> InvalidSearchableRecordType:
        return cls(f"Record type `{_name(record_type)}` must mix in `searchable.Searchable`.")


class NoSearchableAttributesConfigured(SearchableError):
    """Raised when a search runs against an aspect without attributes."""

    @classmethod
    def for_record_type(cls, record_type: type) -> NoSearchableAttributesConfigured:
        return cls(f"There are no searchable attributes defined for `{_name(record_type)}`.")


class UnsupportedDeferredOperation(SearchableError):
    """Raised when a replayed call names a method the query target lacks."""

    def __init__(self, method: str, target: Any) -> None:
        self.method = method
        self.target_type = type(target).__name__
        super().__init__(f"`{self.target_type}` does not support `{method}()`.")


class SearchIndexError(SearchableError):
    """Raised when a call to the external search index fails."""


def _name(record_type: Any) -> str:
    return getattr(record_type, "__qualname__", None) or repr(record_type)
