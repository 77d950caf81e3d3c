"""Store interfaces shared by the sqlite and in-memory backends.

Both backends must behave the same from the outside: same error kinds for the same
inputs, decks listed by name, card IDs numbered per deck starting at 0, and a
deck's cards removed along with it.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Protocol

from models.card import Card
from models.deck import Deck, DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from utils.errors import ErrorKind, StoreError


class DeckStore(Protocol):
    def create_table(self) -> None: ...

    def insert(self, deck: Deck) -> int: ...

    def get_single(self, deck_id: int) -> Deck: ...

    def get_all(self) -> List[Deck]: ...

    def get_count(self) -> int: ...

    def modify(self, deck: Deck) -> None: ...

    def delete(self, deck_id: int) -> None: ...


class CardStore(Protocol):
    def create_table(self) -> None: ...

    def insert(self, card: Card) -> int: ...

    def get_single(self, deck_id: int, card_id: int) -> Card: ...

    def get_all(self, deck_id: int) -> List[Card]: ...

    def get_total_cards(self, deck_id: int) -> int: ...


def check_deck_lengths(deck: Deck) -> None:
    if len(deck.name) > NAME_MAX_LENGTH:
        raise StoreError(ErrorKind.MAX_LENGTH_EXCEEDED, f"name longer than {NAME_MAX_LENGTH}")
    if len(deck.description) > DESCRIPTION_MAX_LENGTH:
        raise StoreError(
            ErrorKind.MAX_LENGTH_EXCEEDED, f"description longer than {DESCRIPTION_MAX_LENGTH}"
        )


def next_modification_time(previous: Optional[datetime]) -> datetime:
    """Current time, nudged past ``previous`` so modification times strictly increase."""
    now = datetime.now(timezone.utc)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
