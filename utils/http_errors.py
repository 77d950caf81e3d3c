import logging

from fastapi import HTTPException, status

from utils.errors import ErrorKind, StoreError

logger = logging.getLogger(__name__)

INVALID_DECK_ID = "Invalid deck ID"
INVALID_CARD_ID = "Invalid card ID"
INVALID_BODY = "Invalid request body"
DECK_NOT_FOUND = "Deck not found"
CARD_NOT_FOUND = "Card not found"
DUPLICATE_KEY = "Duplicate key violation"
INTERNAL_ERROR = "Internal server error"


def http_error_for(exc: StoreError, not_found_detail: str = DECK_NOT_FOUND) -> HTTPException:
    """Map a store error kind to the HTTP error the client sees.

    ``not_found_detail`` is the message for RECORD_NOT_FOUND, which differs by
    operation ("Deck not found" on reads, "Invalid deck ID" on writes).
    """
    logger.debug("Store error: %s", exc, extra={"error_kind": exc.kind.name})
    if exc.kind is ErrorKind.RECORD_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=not_found_detail)
    if exc.kind is ErrorKind.MAX_LENGTH_EXCEEDED:
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_BODY)
    if exc.kind is ErrorKind.DUPLICATE_KEY:
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_KEY)
    if exc.kind is ErrorKind.DECK_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_DECK_ID)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)
