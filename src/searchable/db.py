"""Database wiring: The session factory aspects open their sessions from."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from searchable.exceptions import ConfigurationError

if TYPE_CHECKING:
    from searchable.config.settings import Settings

# Process-wide default (set during application wiring)
_session_factory: sessionmaker[Session] | None = None


def create_session_factory(settings: Settings) -> sessionmaker[Session]:
    """Build an engine and session factory from settings."""
    engine = create_engine(settings.database.url, echo=settings.database.echo, pool_pre_ping=True)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def set_session_factory(factory: sessionmaker[Session] | None) -> None:
    """Set the default session factory used by aspects without their own."""
    global _session_factory
    _session_factory = factory


def get_session_factory() -> sessionmaker[Session]:
    """Get the default session factory.

    Raises:
        ConfigurationError: If no factory has been set.
    """
    if _session_factory is None:
        raise ConfigurationError("No session factory configured. Call set_session_factory() first.")
    return _session_factory
