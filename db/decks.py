import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

from models.deck import Deck
from utils.errors import ErrorKind, StoreError
from .base import check_deck_lengths, next_modification_time
from .database import from_db_timestamp, get_conn, now_timestamp, to_db_timestamp
from .schema import DECKS_SCHEMA_SQL

logger = logging.getLogger(__name__)

DECK_COLUMNS = "d.id, d.name, d.description, d.creation_date, d.modification_date, d.last_study_date"


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(exc)


def _total_cards_expr(conn: sqlite3.Connection) -> str:
    # total_cards is derived from the cards table whenever it exists
    cursor = conn.cursor()
    cursor.execute("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'cards'")
    if cursor.fetchone():
        return "(SELECT COUNT(*) FROM cards c WHERE c.deck_id = d.id)"
    return "d.total_cards"


class SqliteDeckStore:
    """Deck persistence on a SQLite file, one connection per operation."""

    def __init__(self, db_path: Optional[Path]):
        self.db_path = db_path

    def create_table(self) -> None:
        with get_conn(self.db_path) as conn:
            conn.executescript(DECKS_SCHEMA_SQL)
            conn.commit()
        logger.info("Decks table ready")

    def insert(self, deck: Deck) -> int:
        """Insert a deck and return its store-assigned ID.

        Caller-supplied timestamps are kept; missing ones default to now.
        """
        check_deck_lengths(deck)
        now = now_timestamp()
        creation_date = to_db_timestamp(deck.creation_date) if deck.creation_date else now
        modification_date = to_db_timestamp(deck.modification_date) if deck.modification_date else now
        last_study_date = to_db_timestamp(deck.last_study_date) if deck.last_study_date else None
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO decks (name, description, creation_date, modification_date, last_study_date)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (deck.name, deck.description, creation_date, modification_date, last_study_date),
                )
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                if not _is_unique_violation(exc):
                    raise
                raise StoreError(ErrorKind.DUPLICATE_KEY, str(exc)) from exc
            conn.commit()
            return int(cursor.lastrowid)

    def get_single(self, deck_id: int) -> Deck:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {DECK_COLUMNS}, {_total_cards_expr(conn)} AS total_cards FROM decks d WHERE d.id = ?",
                (deck_id,),
            )
            row = cursor.fetchone()
        if row is None:
            raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"deck {deck_id}")
        return Deck(**dict(row))

    def get_all(self) -> List[Deck]:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {DECK_COLUMNS}, {_total_cards_expr(conn)} AS total_cards FROM decks d ORDER BY d.name"
            )
            return [Deck(**dict(row)) for row in cursor.fetchall()]

    def get_count(self) -> int:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(id) FROM decks")
            return int(cursor.fetchone()[0] or 0)

    def modify(self, deck: Deck) -> None:
        """Update name and description; stamps ``deck.modification_date``."""
        check_deck_lengths(deck)
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT modification_date FROM decks WHERE id = ?", (deck.id,))
            row = cursor.fetchone()
            if row is None:
                raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"deck {deck.id}")
            modified = next_modification_time(from_db_timestamp(row["modification_date"]))
            try:
                cursor.execute(
                    "UPDATE decks SET name = ?, description = ?, modification_date = ? WHERE id = ?",
                    (deck.name, deck.description, to_db_timestamp(modified), deck.id),
                )
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                if not _is_unique_violation(exc):
                    raise
                raise StoreError(ErrorKind.DUPLICATE_KEY, str(exc)) from exc
            conn.commit()
        deck.modification_date = modified

    def delete(self, deck_id: int) -> None:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
            if cursor.rowcount == 0:
                raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"deck {deck_id}")
            conn.commit()
