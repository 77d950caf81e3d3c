"""In-memory stores, used by tests and by ``store.backend = "memory"``.

A ``MemoryDatabase`` plays the part of the connection: decks and cards that must see
each other share one instance. Nothing here is module-level, so independent stores
can live side by side.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from models.card import Card
from models.deck import Deck
from utils.errors import ErrorKind, StoreError
from .base import check_deck_lengths, next_modification_time


class MemoryDatabase:
    def __init__(self):
        self.decks: Optional[Dict[int, Deck]] = None
        self.cards: Optional[Dict[int, Dict[int, Card]]] = None
        self.next_deck_id = 0
        self.next_card_ids: Dict[int, int] = {}


class MemoryDeckStore:
    def __init__(self, database: Optional[MemoryDatabase] = None):
        self.database = database if database is not None else MemoryDatabase()

    def _decks(self) -> Dict[int, Deck]:
        if self.database.decks is None:
            raise StoreError(ErrorKind.DATABASE_UNAVAILABLE, "decks table not created")
        return self.database.decks

    def create_table(self) -> None:
        if self.database.decks is None:
            self.database.decks = {}

    def insert(self, deck: Deck) -> int:
        check_deck_lengths(deck)
        decks = self._decks()
        if any(existing.name == deck.name for existing in decks.values()):
            raise StoreError(ErrorKind.DUPLICATE_KEY, f"name {deck.name!r}")
        now = datetime.now(timezone.utc)
        deck_id = self.database.next_deck_id
        decks[deck_id] = deck.model_copy(
            update={
                "id": deck_id,
                "creation_date": deck.creation_date or now,
                "modification_date": deck.modification_date or now,
                "total_cards": 0,
            }
        )
        self.database.next_deck_id += 1
        return deck_id

    def _with_total(self, deck: Deck) -> Deck:
        cards = (self.database.cards or {}).get(deck.id, {})
        return deck.model_copy(update={"total_cards": len(cards)})

    def get_single(self, deck_id: int) -> Deck:
        deck = self._decks().get(deck_id)
        if deck is None:
            raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"deck {deck_id}")
        return self._with_total(deck)

    def get_all(self) -> List[Deck]:
        decks = sorted(self._decks().values(), key=lambda deck: deck.name)
        return [self._with_total(deck) for deck in decks]

    def get_count(self) -> int:
        return len(self._decks())

    def modify(self, deck: Deck) -> None:
        check_deck_lengths(deck)
        decks = self._decks()
        stored = decks.get(deck.id)
        if stored is None:
            raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"deck {deck.id}")
        if any(other.name == deck.name and other_id != deck.id for other_id, other in decks.items()):
            raise StoreError(ErrorKind.DUPLICATE_KEY, f"name {deck.name!r}")
        modified = next_modification_time(stored.modification_date)
        decks[deck.id] = stored.model_copy(
            update={"name": deck.name, "description": deck.description, "modification_date": modified}
        )
        deck.modification_date = modified

    def delete(self, deck_id: int) -> None:
        decks = self._decks()
        if deck_id not in decks:
            raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"deck {deck_id}")
        del decks[deck_id]
        # Cascade, as the foreign key does in sqlite
        if self.database.cards is not None:
            self.database.cards.pop(deck_id, None)
        self.database.next_card_ids.pop(deck_id, None)


class MemoryCardStore:
    def __init__(self, database: Optional[MemoryDatabase] = None):
        self.database = database if database is not None else MemoryDatabase()

    def _cards(self) -> Dict[int, Dict[int, Card]]:
        if self.database.cards is None:
            raise StoreError(ErrorKind.DATABASE_UNAVAILABLE, "cards table not created")
        return self.database.cards

    def create_table(self) -> None:
        if self.database.cards is None:
            self.database.cards = {}

    def insert(self, card: Card) -> int:
        cards = self._cards()
        if card.deck_id not in (self.database.decks or {}):
            raise StoreError(ErrorKind.DECK_NOT_FOUND, f"deck {card.deck_id}")
        if card.next_review_time < datetime.now(timezone.utc):
            raise ValueError("next_review_time is in the past")
        card_id = self.database.next_card_ids.get(card.deck_id, 0)
        cards.setdefault(card.deck_id, {})[card_id] = card.model_copy(update={"id": card_id})
        self.database.next_card_ids[card.deck_id] = card_id + 1
        return card_id

    def get_single(self, deck_id: int, card_id: int) -> Card:
        card = self._cards().get(deck_id, {}).get(card_id)
        if card is None:
            raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"card {card_id} in deck {deck_id}")
        return card

    def get_all(self, deck_id: int) -> List[Card]:
        cards = self._cards().get(deck_id, {})
        return [cards[card_id] for card_id in sorted(cards)]

    def get_total_cards(self, deck_id: int) -> int:
        return len(self._cards().get(deck_id, {}))
