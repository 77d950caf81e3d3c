from datetime import datetime, timedelta, timezone

import pytest

from db.cards import SqliteCardStore
from db.database import get_conn, get_schema_version, init_db
from db.decks import SqliteDeckStore
from db.memory import MemoryCardStore, MemoryDatabase, MemoryDeckStore
from db.schema import SCHEMA_VERSION
from models.card import CardContent, new_card
from models.deck import new_deck
from utils.errors import ErrorKind, StoreError

CONTENT = CardContent(fields=["front", "back"], values=["Q", "A"]).encode()


def test_insert_then_get_single(stores):
    deck_store, _ = stores
    deck_id = deck_store.insert(new_deck("Algebra", "Linear equations"))

    deck = deck_store.get_single(deck_id)

    assert deck.id == deck_id
    assert deck.name == "Algebra"
    assert deck.description == "Linear equations"
    assert deck.creation_date == deck.modification_date
    assert deck.total_cards == 0


def test_insert_keeps_caller_timestamps(stores):
    deck_store, _ = stores
    deck = new_deck("Dated", "")
    stamp = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    deck.creation_date = stamp
    deck.modification_date = stamp

    stored = deck_store.get_single(deck_store.insert(deck))

    assert stored.creation_date == stamp
    assert stored.modification_date == stamp


@pytest.mark.parametrize(
    "name, description",
    [("a" * 65, ""), ("ok", "d" * 256)],
)
def test_insert_too_long_writes_nothing(stores, name, description):
    deck_store, _ = stores
    with pytest.raises(StoreError) as info:
        deck_store.insert(new_deck(name, description))
    assert info.value.kind is ErrorKind.MAX_LENGTH_EXCEEDED
    assert deck_store.get_count() == 0


def test_insert_at_length_limits(stores):
    deck_store, _ = stores
    deck_store.insert(new_deck("a" * 64, "d" * 255))
    assert deck_store.get_count() == 1


def test_insert_duplicate_name(stores):
    deck_store, _ = stores
    deck_store.insert(new_deck("Deck #1", "first"))
    with pytest.raises(StoreError) as info:
        deck_store.insert(new_deck("Deck #1", "second"))
    assert info.value.kind is ErrorKind.DUPLICATE_KEY
    assert deck_store.get_count() == 1


def test_get_single_missing(stores):
    deck_store, _ = stores
    with pytest.raises(StoreError) as info:
        deck_store.get_single(42)
    assert info.value.kind is ErrorKind.RECORD_NOT_FOUND


def test_empty_store(stores):
    deck_store, _ = stores
    assert deck_store.get_all() == []
    assert deck_store.get_count() == 0


def test_get_all_ordered_by_name(stores):
    deck_store, _ = stores
    for name in ("Chemistry", "Algebra", "Biology"):
        deck_store.insert(new_deck(name, ""))

    assert [deck.name for deck in deck_store.get_all()] == ["Algebra", "Biology", "Chemistry"]
    assert deck_store.get_count() == 3


def test_modify_updates_fields_and_modification_date(stores):
    deck_store, _ = stores
    deck_id = deck_store.insert(new_deck("Old", "old description"))
    before = deck_store.get_single(deck_id)

    change = new_deck("New", "new description")
    change.id = deck_id
    deck_store.modify(change)
    after = deck_store.get_single(deck_id)

    assert after.name == "New"
    assert after.description == "new description"
    assert after.creation_date == before.creation_date
    assert after.modification_date > before.modification_date
    assert change.modification_date == after.modification_date


def test_modify_missing(stores):
    deck_store, _ = stores
    change = new_deck("Name", "")
    change.id = 7
    with pytest.raises(StoreError) as info:
        deck_store.modify(change)
    assert info.value.kind is ErrorKind.RECORD_NOT_FOUND


def test_modify_checks_length_and_uniqueness(stores):
    deck_store, _ = stores
    first = deck_store.insert(new_deck("First", ""))
    deck_store.insert(new_deck("Second", ""))

    too_long = new_deck("x" * 65, "")
    too_long.id = first
    with pytest.raises(StoreError) as info:
        deck_store.modify(too_long)
    assert info.value.kind is ErrorKind.MAX_LENGTH_EXCEEDED

    clash = new_deck("Second", "")
    clash.id = first
    with pytest.raises(StoreError) as info:
        deck_store.modify(clash)
    assert info.value.kind is ErrorKind.DUPLICATE_KEY

    same_name = new_deck("First", "only the description changes")
    same_name.id = first
    deck_store.modify(same_name)
    assert deck_store.get_single(first).description == "only the description changes"


def test_delete_then_get(stores):
    deck_store, _ = stores
    deck_id = deck_store.insert(new_deck("Gone", ""))
    deck_store.delete(deck_id)

    with pytest.raises(StoreError) as info:
        deck_store.get_single(deck_id)
    assert info.value.kind is ErrorKind.RECORD_NOT_FOUND
    with pytest.raises(StoreError) as info:
        deck_store.delete(deck_id)
    assert info.value.kind is ErrorKind.RECORD_NOT_FOUND


def test_card_ids_are_numbered_per_deck(stores):
    deck_store, card_store = stores
    first = deck_store.insert(new_deck("First", ""))
    second = deck_store.insert(new_deck("Second", ""))

    assert card_store.insert(new_card(first, CONTENT, "")) == 0
    assert card_store.insert(new_card(first, CONTENT, "")) == 1
    assert card_store.insert(new_card(second, CONTENT, "")) == 0
    assert card_store.get_total_cards(first) == 2
    assert card_store.get_total_cards(second) == 1


def test_card_insert_unknown_deck(stores):
    _, card_store = stores
    with pytest.raises(StoreError) as info:
        card_store.insert(new_card(99, CONTENT, ""))
    assert info.value.kind is ErrorKind.DECK_NOT_FOUND


def test_total_cards_unknown_or_empty_deck(stores):
    deck_store, card_store = stores
    deck_id = deck_store.insert(new_deck("Empty", ""))
    assert card_store.get_total_cards(deck_id) == 0
    assert card_store.get_total_cards(1234) == 0


def test_deck_reads_count_cards(stores):
    deck_store, card_store = stores
    deck_id = deck_store.insert(new_deck("Counted", ""))
    card_store.insert(new_card(deck_id, CONTENT, ""))
    card_store.insert(new_card(deck_id, CONTENT, ""))

    assert deck_store.get_single(deck_id).total_cards == 2
    assert deck_store.get_all()[0].total_cards == 2


def test_delete_deck_removes_its_cards(stores):
    deck_store, card_store = stores
    deck_id = deck_store.insert(new_deck("Cascade", ""))
    card_store.insert(new_card(deck_id, CONTENT, ""))

    deck_store.delete(deck_id)

    assert card_store.get_total_cards(deck_id) == 0
    assert card_store.get_all(deck_id) == []


def test_card_read_back(stores):
    deck_store, card_store = stores
    deck_id = deck_store.insert(new_deck("Readable", ""))
    card = new_card(deck_id, CONTENT, "chapter 1")
    card_id = card_store.insert(card)

    stored = card_store.get_single(deck_id, card_id)

    assert stored.id == card_id
    assert stored.content == CONTENT
    assert stored.source == "chapter 1"
    assert stored.next_review_time == card.next_review_time
    assert [c.id for c in card_store.get_all(deck_id)] == [card_id]
    with pytest.raises(StoreError) as info:
        card_store.get_single(deck_id, card_id + 1)
    assert info.value.kind is ErrorKind.RECORD_NOT_FOUND


def test_card_review_time_in_the_past_is_rejected(stores):
    deck_store, card_store = stores
    deck_id = deck_store.insert(new_deck("Past", ""))
    card = new_card(deck_id, CONTENT, "")
    card.next_review_time = datetime.now(timezone.utc) - timedelta(hours=1)

    with pytest.raises(Exception) as info:
        card_store.insert(card)
    assert not isinstance(info.value, StoreError)
    assert card_store.get_total_cards(deck_id) == 0


def test_memory_store_before_create_table():
    database = MemoryDatabase()
    deck_store = MemoryDeckStore(database)
    card_store = MemoryCardStore(database)

    for call in (deck_store.get_all, deck_store.get_count, lambda: deck_store.get_single(0)):
        with pytest.raises(StoreError) as info:
            call()
        assert info.value.kind is ErrorKind.DATABASE_UNAVAILABLE
    with pytest.raises(StoreError) as info:
        card_store.get_total_cards(0)
    assert info.value.kind is ErrorKind.DATABASE_UNAVAILABLE


def test_memory_stores_are_independent():
    first = MemoryDeckStore()
    second = MemoryDeckStore()
    first.create_table()
    second.create_table()

    first.insert(new_deck("Only here", ""))

    assert first.get_count() == 1
    assert second.get_count() == 0


def test_sqlite_store_without_path():
    deck_store = SqliteDeckStore(None)
    with pytest.raises(StoreError) as info:
        deck_store.create_table()
    assert info.value.kind is ErrorKind.DATABASE_UNAVAILABLE
    with pytest.raises(StoreError) as info:
        SqliteCardStore(None).get_total_cards(0)
    assert info.value.kind is ErrorKind.DATABASE_UNAVAILABLE


def test_sqlite_store_missing_table(tmp_path):
    deck_store = SqliteDeckStore(tmp_path / "empty.db")
    with pytest.raises(StoreError) as info:
        deck_store.get_count()
    assert info.value.kind is ErrorKind.TABLE_MISSING


def test_sqlite_create_table_is_idempotent(sqlite_stores):
    deck_store, card_store = sqlite_stores
    deck_store.insert(new_deck("Kept", ""))
    deck_store.create_table()
    card_store.create_table()
    assert deck_store.get_count() == 1


def test_init_db_writes_schema_version(tmp_path):
    db_path = tmp_path / "nested" / "flashdeck.db"
    init_db(db_path)
    with get_conn(db_path) as conn:
        assert get_schema_version(conn) == SCHEMA_VERSION
    assert SqliteDeckStore(db_path).get_count() == 0


def test_write_after_failed_write(stores):
    deck_store, _ = stores
    deck_store.insert(new_deck("A", ""))
    with pytest.raises(StoreError) as duplicate:
        deck_store.insert(new_deck("A", ""))

    # The failed insert's traceback is still referenced here
    assert duplicate.value.kind is ErrorKind.DUPLICATE_KEY
    deck_store.insert(new_deck("B", ""))
    assert deck_store.get_count() == 2
