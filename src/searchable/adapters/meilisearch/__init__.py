"""MeiliSearch index connector."""

from searchable.adapters.meilisearch.index import MeiliSearchIndex

__all__ = ["MeiliSearchIndex"]
