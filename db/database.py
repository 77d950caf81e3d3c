import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from utils.errors import ErrorKind, StoreError
from .schema import DECKS_SCHEMA_SQL, CARDS_SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)

# Fixed width keeps text comparison chronological
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

def init_db(db_path: Path) -> None:
    """Create every table and index if missing and record the schema version."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_conn(db_path) as conn:
        conn.executescript(DECKS_SCHEMA_SQL)
        conn.executescript(CARDS_SCHEMA_SQL)
        ensure_schema_version(conn)
        conn.commit()
    logger.info("Database initialized at %s", db_path)

def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")

def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)

def to_db_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)

def now_timestamp() -> str:
    return to_db_timestamp(datetime.now(timezone.utc))

@contextmanager
def get_conn(db_path: Optional[Path]) -> Iterator[sqlite3.Connection]:
    """Context manager for a SQLite connection with foreign keys on and dict-like rows.

    Raises DATABASE_UNAVAILABLE when no path is configured and TABLE_MISSING when a
    statement hits a table that was never created.
    """
    if db_path is None:
        raise StoreError(ErrorKind.DATABASE_UNAVAILABLE, "no database path configured")
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    except BaseException as exc:
        # Release the write lock even while the caller still holds the exception
        conn.rollback()
        if isinstance(exc, sqlite3.OperationalError) and "no such table" in str(exc):
            raise StoreError(ErrorKind.TABLE_MISSING, str(exc)) from exc
        raise
    finally:
        conn.close()

def from_db_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
