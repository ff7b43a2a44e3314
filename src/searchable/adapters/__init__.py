"""Search index layer: Connectors for external full-text engines.

Built-in indexes:
  - meilisearch: MeiliSearch (instant, typo-tolerant search)

Implement ``SearchIndex`` to connect your own engine.
"""
