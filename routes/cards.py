import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from db.base import CardStore, DeckStore
from models.card import CardCreate, CardRead, new_card
from routes.deps import get_card_store, get_deck_store, read_body, require_id
from utils.errors import StoreError
from utils.http_errors import CARD_NOT_FOUND, INVALID_BODY, INVALID_CARD_ID, INVALID_DECK_ID, http_error_for
from utils.validation import content_problem

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/{deck_id}/card", status_code=status.HTTP_201_CREATED)
async def create_card(deck_id: str, request: Request, store: CardStore = Depends(get_card_store)):
    """Add a card to a deck. The field/value payload is stored as compact JSON."""
    parsed_id = require_id(deck_id, INVALID_DECK_ID)
    body = await read_body(request, CardCreate)
    problem = content_problem(body.content)
    if problem:
        logger.debug("Invalid card content: %s", problem, extra={"deck_id": parsed_id})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_BODY)
    card = new_card(parsed_id, body.content.encode(), body.source or "")
    try:
        card_id = store.insert(card)
    except StoreError as exc:
        raise http_error_for(exc, INVALID_DECK_ID) from exc
    logger.debug("Created card", extra={"deck_id": parsed_id, "card_id": card_id})
    return {"id": card_id}

@router.get("/{deck_id}/card/count")
async def get_total_cards(deck_id: str, store: CardStore = Depends(get_card_store)):
    parsed_id = require_id(deck_id, INVALID_DECK_ID)
    try:
        total = store.get_total_cards(parsed_id)
    except StoreError as exc:
        raise http_error_for(exc) from exc
    return {"total": total}

@router.get("/{deck_id}/card", response_model=List[CardRead])
async def list_cards(
    deck_id: str,
    deck_store: DeckStore = Depends(get_deck_store),
    card_store: CardStore = Depends(get_card_store),
):
    parsed_id = require_id(deck_id, INVALID_DECK_ID)
    try:
        deck_store.get_single(parsed_id)
        cards = card_store.get_all(parsed_id)
    except StoreError as exc:
        raise http_error_for(exc, INVALID_DECK_ID) from exc
    return [CardRead.from_card(card) for card in cards]

@router.get("/{deck_id}/card/{card_id}", response_model=CardRead)
async def get_card(deck_id: str, card_id: str, store: CardStore = Depends(get_card_store)):
    parsed_deck_id = require_id(deck_id, INVALID_DECK_ID)
    parsed_card_id = require_id(card_id, INVALID_CARD_ID)
    try:
        card = store.get_single(parsed_deck_id, parsed_card_id)
    except StoreError as exc:
        raise http_error_for(exc, CARD_NOT_FOUND) from exc
    return CardRead.from_card(card)
