from pydantic import BaseModel
from typing import Optional
from datetime import datetime, timezone

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 255

class DeckBase(BaseModel):
    name: str
    description: str = ""

class DeckCreate(DeckBase):
    # Blank names are rejected by the handler after trimming, not by the model
    name: str = ""
    # null reads as an empty description
    description: Optional[str] = ""

class Deck(DeckBase):
    id: Optional[int] = None
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    last_study_date: Optional[datetime] = None
    total_cards: int = 0

    class Config:
        from_attributes = True

class DeckSummary(BaseModel):
    """Projection used by the deck list: string ID, no timestamps or counters."""
    id: str
    name: str
    description: str

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckSummary":
        return cls(id=str(deck.id), name=deck.name, description=deck.description)

def new_deck(name: str, description: str) -> Deck:
    """Build an unsaved deck stamped with the current time. No validation."""
    now = datetime.now(timezone.utc)
    return Deck(
        name=name,
        description=description,
        creation_date=now,
        modification_date=now,
        last_study_date=None,
        total_cards=0,
    )
