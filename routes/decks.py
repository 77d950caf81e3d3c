import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from db.base import DeckStore
from models.deck import Deck, DeckCreate, DeckSummary, DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, new_deck
from routes.deps import get_deck_store, read_body, require_id
from utils.errors import StoreError
from utils.http_errors import DECK_NOT_FOUND, INVALID_BODY, INVALID_DECK_ID, http_error_for
from utils.validation import clean_deck_fields

logger = logging.getLogger(__name__)

router = APIRouter()

async def _read_deck_input(request: Request) -> DeckCreate:
    body = await read_body(request, DeckCreate)
    name, description = clean_deck_fields(body.name, body.description or "")
    if not name:
        logger.debug("Deck name is blank")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_BODY)
    return DeckCreate(name=name, description=description)

# Fixed paths first so they are not captured by /{deck_id}

@router.get("/count")
async def get_deck_count(store: DeckStore = Depends(get_deck_store)):
    try:
        count = store.get_count()
    except StoreError as exc:
        raise http_error_for(exc) from exc
    return {"count": count}

@router.get("/nameMaxLength")
async def get_name_max_length():
    return {"maxLength": NAME_MAX_LENGTH}

@router.get("/descriptionMaxLength")
async def get_description_max_length():
    return {"maxLength": DESCRIPTION_MAX_LENGTH}

@router.get("", response_model=List[DeckSummary])
async def list_decks(store: DeckStore = Depends(get_deck_store)):
    """All decks by name, projected to id/name/description."""
    try:
        decks = store.get_all()
    except StoreError as exc:
        raise http_error_for(exc) from exc
    return [DeckSummary.from_deck(deck) for deck in decks]

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_deck(request: Request, store: DeckStore = Depends(get_deck_store)):
    body = await _read_deck_input(request)
    try:
        deck_id = store.insert(new_deck(body.name, body.description))
    except StoreError as exc:
        raise http_error_for(exc) from exc
    logger.debug("Created deck", extra={"deck_id": deck_id})
    return {"id": deck_id}

@router.get("/{deck_id}", response_model=Deck)
async def get_deck(deck_id: str, store: DeckStore = Depends(get_deck_store)):
    parsed_id = require_id(deck_id, INVALID_DECK_ID)
    try:
        return store.get_single(parsed_id)
    except StoreError as exc:
        raise http_error_for(exc, DECK_NOT_FOUND) from exc

@router.post("/{deck_id}")
async def modify_deck(deck_id: str, request: Request, store: DeckStore = Depends(get_deck_store)):
    """Replace a deck's name and description."""
    parsed_id = require_id(deck_id, INVALID_DECK_ID)
    body = await _read_deck_input(request)
    deck = new_deck(body.name, body.description)
    deck.id = parsed_id
    try:
        store.modify(deck)
    except StoreError as exc:
        raise http_error_for(exc, INVALID_DECK_ID) from exc
    logger.debug("Modified deck", extra={"deck_id": parsed_id})
    return {"id": parsed_id}

@router.delete("/{deck_id}")
async def delete_deck(deck_id: str, store: DeckStore = Depends(get_deck_store)):
    parsed_id = require_id(deck_id, INVALID_DECK_ID)
    try:
        store.delete(parsed_id)
    except StoreError as exc:
        raise http_error_for(exc, INVALID_DECK_ID) from exc
    logger.debug("Deleted deck", extra={"deck_id": parsed_id})
    return {"id": parsed_id}
