"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
from records import Article, Base, FakeMeili, Product
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from searchable.adapters.meilisearch.index import MeiliSearchIndex
from searchable.config.settings import Settings
from searchable.db import set_session_factory


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        database={"url": "sqlite://"},
    )


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite database shared by every connection."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine)


@pytest.fixture
def default_session_factory(session_factory: sessionmaker[Session]) -> Iterator[sessionmaker[Session]]:
    """Install ``session_factory`` as the process-wide default."""
    set_session_factory(session_factory)
    yield session_factory
    set_session_factory(None)


@pytest.fixture
def articles(session_factory: sessionmaker[Session]) -> None:
    with session_factory() as session:
        session.add_all(
            [
                Article(id=1, title="Great Foobaz", code="ABC"),
                Article(id=2, title="Nothing", code="abc"),
                Article(id=3, title="Bar none", code="XYZ"),
                Article(id=4, title="100% cotton", code="P1"),
                Article(id=5, title="100 cotton", code="P2"),
                Article(id=6, title="snake_case", code="S1"),
                Article(id=7, title="snakeXcase", code="S2"),
                Article(id=8, title="C:\\temp\\file", code="W1"),
                Article(id=9, title="C:temp", code="W2"),
            ]
        )
        session.commit()


@pytest.fixture
def products(session_factory: sessionmaker[Session]) -> None:
    with session_factory() as session:
        session.add_all(
            [
                Product(id=1, name="Desk lamp", sku="LMP-1"),
                Product(id=2, name="Floor lamp", sku="LMP-2"),
                Product(id=3, name="Lamp shade", sku="SHD-1"),
            ]
        )
        session.commit()


@pytest.fixture
def meili() -> FakeMeili:
    return FakeMeili(hits=[{"id": 3, "name": "Lamp shade"}, {"id": 1, "name": "Desk lamp"}])


@pytest.fixture
def meili_index(meili: FakeMeili) -> Iterator[MeiliSearchIndex]:
    client = httpx.Client(base_url="http://meili.test", transport=httpx.MockTransport(meili.handler))
    index = MeiliSearchIndex("products", client=client)
    yield index
    index.close()


@pytest.fixture
def bound_index(meili_index: MeiliSearchIndex, monkeypatch: pytest.MonkeyPatch) -> MeiliSearchIndex:
    """Bind the fake index to ``Product`` for the duration of a test."""
    monkeypatch.setattr(Product, "search_index", meili_index)
    return meili_index
