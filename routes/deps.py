import logging
from typing import Type, TypeVar

from fastapi import HTTPException, Request, status
from pydantic import BaseModel, ValidationError

from db.base import CardStore, DeckStore
from utils.http_errors import INVALID_BODY
from utils.validation import parse_id

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_deck_store(request: Request) -> DeckStore:
    """FastAPI dependency returning the deck store the app was built with."""
    return request.app.state.deck_store


def get_card_store(request: Request) -> CardStore:
    return request.app.state.card_store


def require_id(raw: str, detail: str) -> int:
    value = parse_id(raw)
    if value is None:
        logger.debug("Invalid ID %s", raw)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    return value


async def read_body(request: Request, model: Type[ModelT]) -> ModelT:
    """Decode the JSON body into ``model``; any decode or shape problem is a 400."""
    try:
        payload = await request.json()
        return model.model_validate(payload)
    except (ValueError, ValidationError) as exc:
        logger.debug("Error decoding request body: %s", exc, extra={"path": request.url.path})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_BODY) from exc
