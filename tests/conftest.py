import pytest
from fastapi.testclient import TestClient

from db.cards import SqliteCardStore
from db.decks import SqliteDeckStore
from db.memory import MemoryCardStore, MemoryDatabase, MemoryDeckStore
from main import create_app


@pytest.fixture
def memory_stores():
    database = MemoryDatabase()
    deck_store = MemoryDeckStore(database)
    card_store = MemoryCardStore(database)
    deck_store.create_table()
    card_store.create_table()
    return deck_store, card_store


@pytest.fixture
def sqlite_stores(tmp_path):
    db_path = tmp_path / "flashdeck.db"
    deck_store = SqliteDeckStore(db_path)
    card_store = SqliteCardStore(db_path)
    deck_store.create_table()
    card_store.create_table()
    return deck_store, card_store


@pytest.fixture(params=["memory", "sqlite"])
def stores(request):
    """Both backends, so every store test checks they behave the same."""
    return request.getfixturevalue(f"{request.param}_stores")


@pytest.fixture
def client(memory_stores):
    deck_store, card_store = memory_stores
    return TestClient(create_app(deck_store, card_store))


@pytest.fixture
def sqlite_client(sqlite_stores):
    deck_store, card_store = sqlite_stores
    return TestClient(create_app(deck_store, card_store))
