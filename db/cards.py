import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

from models.card import Card
from utils.errors import ErrorKind, StoreError
from .database import get_conn, to_db_timestamp
from .schema import CARDS_SCHEMA_SQL

logger = logging.getLogger(__name__)

CARD_COLUMNS = (
    "id, deck_id, content, creation_time, modification_time, next_review_time, "
    "retention_level, flag, source"
)


class SqliteCardStore:
    """Card persistence on a SQLite file. Card IDs restart at 0 for every deck."""

    def __init__(self, db_path: Optional[Path]):
        self.db_path = db_path

    def create_table(self) -> None:
        with get_conn(self.db_path) as conn:
            conn.executescript(CARDS_SCHEMA_SQL)
            conn.commit()
        logger.info("Cards table ready")

    def insert(self, card: Card) -> int:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            # Hold the write lock while picking the next per-deck ID
            cursor.execute("BEGIN IMMEDIATE")
            cursor.execute("SELECT 1 FROM decks WHERE id = ?", (card.deck_id,))
            if not cursor.fetchone():
                conn.rollback()
                raise StoreError(ErrorKind.DECK_NOT_FOUND, f"deck {card.deck_id}")
            cursor.execute(
                "SELECT COALESCE(MAX(id) + 1, 0) FROM cards WHERE deck_id = ?",
                (card.deck_id,),
            )
            card_id = int(cursor.fetchone()[0])
            try:
                cursor.execute(
                    f"INSERT INTO cards ({CARD_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        card_id,
                        card.deck_id,
                        card.content,
                        to_db_timestamp(card.creation_time),
                        to_db_timestamp(card.modification_time),
                        to_db_timestamp(card.next_review_time),
                        card.retention_level,
                        card.flag,
                        card.source,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                if "FOREIGN KEY constraint failed" in str(exc):
                    raise StoreError(ErrorKind.DECK_NOT_FOUND, f"deck {card.deck_id}") from exc
                raise
            conn.commit()
        return card_id

    def get_single(self, deck_id: int, card_id: int) -> Card:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {CARD_COLUMNS} FROM cards WHERE deck_id = ? AND id = ?",
                (deck_id, card_id),
            )
            row = cursor.fetchone()
        if row is None:
            raise StoreError(ErrorKind.RECORD_NOT_FOUND, f"card {card_id} in deck {deck_id}")
        return Card(**dict(row))

    def get_all(self, deck_id: int) -> List[Card]:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {CARD_COLUMNS} FROM cards WHERE deck_id = ? ORDER BY id",
                (deck_id,),
            )
            return [Card(**dict(row)) for row in cursor.fetchall()]

    def get_total_cards(self, deck_id: int) -> int:
        with get_conn(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM cards WHERE deck_id = ?", (deck_id,))
            return int(cursor.fetchone()[0] or 0)
