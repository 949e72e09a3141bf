"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from flashdeck.database import init_db, make_engine
from flashdeck.schemas import Card, Deck
from flashdeck.services.persistence_service import DeckGateway, SqlBlobStore

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """A fresh in-memory database for each test."""
    test_engine = make_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    init_db(test_engine)
    try:
        yield test_engine
    finally:
        SQLModel.metadata.drop_all(test_engine)
        test_engine.dispose()


@pytest.fixture
def store(engine: Engine) -> SqlBlobStore:
    return SqlBlobStore(engine)


@pytest.fixture
def gateway(store: SqlBlobStore) -> DeckGateway:
    return DeckGateway(store, key="flashdeck-test.v1")


def make_card(card_id: str, front: str = "Front text", back: str = "Back text",
              known: bool = False, created_at: int = 0) -> Card:
    return Card(id=card_id, front=front, back=back, known=known, created_at=created_at)


@pytest.fixture
def card_factory():
    return make_card


@pytest.fixture
def five_card_deck() -> Deck:
    """Five cards, two of them known, created at 100..500 and stored newest first."""
    return Deck(
        name="Biology",
        cards=[
            make_card("e", front="Ribosome", back="Builds proteins", known=False, created_at=500),
            make_card("d", front="Mitochondria", back="Makes ATP", known=True, created_at=400),
            make_card("c", front="Nucleus", back="Holds DNA", known=False, created_at=300),
            make_card("b", front="Cell wall", back="Plant cell boundary", known=True, created_at=200),
            make_card("a", front="Vacuole", back="Stores water", known=False, created_at=100),
        ],
    )
