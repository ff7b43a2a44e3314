"""LIKE pattern escaping.

Literal backslashes are rewritten first, using a sequence that depends on
the database dialect, and only then are the ``%`` and ``_`` wildcards
escaped. The order matters: the backslashes added for the wildcards must
not be rewritten again. The pattern is always matched with ``ESCAPE '\\'``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from searchable.config.settings import SearchSettings

LIKE_ESCAPE_CHAR = "\\"


class EscapePolicy(BaseModel):
    """How one dialect wants a literal backslash written in a LIKE pattern."""

    model_config = ConfigDict(frozen=True)

    backslash_sequence: str = Field(min_length=1)

    def escape(self, term: str) -> str:
        term = term.replace("\\", self.backslash_sequence)
        return term.replace("%", "\\%").replace("_", "\\_")


# SQLite applies no string-literal escaping of its own.
SQLITE_POLICY = EscapePolicy(backslash_sequence="\\\\")
# Over bound parameters (psycopg, mysqlclient) this over-escapes; configure two
# backslashes for those dialects through ``search.escape_sequences``.
DEFAULT_POLICY = EscapePolicy(backslash_sequence="\\\\\\")


class EscapePolicies:
    """Escape policies keyed by SQLAlchemy dialect name."""

    def __init__(self, default: EscapePolicy = DEFAULT_POLICY) -> None:
        self.default = default
        self._policies: dict[str, EscapePolicy] = {"sqlite": SQLITE_POLICY}

    @classmethod
    def from_settings(cls, settings: SearchSettings) -> EscapePolicies:
        policies = cls()
        for dialect, sequence in settings.escape_sequences.items():
            policies.register(dialect, sequence)
        return policies

    def register(self, dialect: str, backslash_sequence: str) -> None:
        self._policies[dialect] = EscapePolicy(backslash_sequence=backslash_sequence)

    def for_dialect(self, dialect: str) -> EscapePolicy:
        return self._policies.get(dialect, self.default)

    def for_bind(self, bind: Engine | Connection) -> EscapePolicy:
        return self.for_dialect(bind.dialect.name)


def escape_like(term: str, policy: EscapePolicy) -> str:
    """Escape ``term`` and wrap it for a substring LIKE match."""
    return f"%{policy.escape(term)}%"
