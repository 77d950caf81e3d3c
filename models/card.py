import json
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timedelta, timezone

REVIEW_DELAY = timedelta(minutes=10)
FLAG_MAX = 9

class CardContent(BaseModel):
    fields: List[str]
    values: List[str]

    def encode(self) -> str:
        """Compact JSON form stored in the card's content column."""
        return json.dumps({"fields": self.fields, "values": self.values}, separators=(",", ":"))

    @classmethod
    def decode(cls, raw: str) -> "CardContent":
        return cls.model_validate_json(raw)

class CardCreate(BaseModel):
    content: CardContent
    source: Optional[str] = ""

class Card(BaseModel):
    id: Optional[int] = None
    deck_id: int
    content: str
    creation_time: datetime
    modification_time: datetime
    next_review_time: datetime
    retention_level: int = Field(0, ge=0)
    flag: int = Field(0, ge=0, le=FLAG_MAX)
    source: str = ""

    class Config:
        from_attributes = True

class CardRead(BaseModel):
    """Card as returned over HTTP, with the content payload decoded."""
    id: int
    deck_id: int
    content: CardContent
    creation_time: datetime
    modification_time: datetime
    next_review_time: datetime
    retention_level: int
    flag: int
    source: str

    @classmethod
    def from_card(cls, card: Card) -> "CardRead":
        data = card.model_dump()
        data["content"] = CardContent.decode(card.content)
        return cls(**data)

def new_card(deck_id: int, content: str, source: str = "") -> Card:
    now = datetime.now(timezone.utc)
    return Card(
        deck_id=deck_id,
        content=content,
        source=source,
        creation_time=now,
        modification_time=now,
        next_review_time=now + REVIEW_DELAY,
        retention_level=0,
        flag=0,
    )
