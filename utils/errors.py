"""Store error kinds shared by the persistence and HTTP layers.

Stores raise ``StoreError`` with one of the ``ErrorKind`` members below. Callers
branch on ``exc.kind``; the message is for logs only. Anything that is not a
``StoreError`` is an opaque failure and ends up as a 500.
"""

from enum import Enum


class ErrorKind(Enum):
    DATABASE_UNAVAILABLE = "database doesn't exist"
    TABLE_MISSING = "table doesn't exist"
    RECORD_NOT_FOUND = "record doesn't exist"
    MAX_LENGTH_EXCEEDED = "max length exceeded"
    DUPLICATE_KEY = "duplicate key violation"
    DECK_NOT_FOUND = "deck doesn't exist"


class StoreError(Exception):
    def __init__(self, kind: ErrorKind, detail: str = ""):
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.detail = detail
