import re
from typing import Optional, Tuple

from models.card import CardContent

_ID_RE = re.compile(r"[+-]?[0-9]+")

# Signed 64-bit, the widest integer SQLite stores
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


def parse_id(raw: str) -> Optional[int]:
    """Parse a path ID as a plain base-10 integer, None when it is not one or is out of range."""
    if not _ID_RE.fullmatch(raw):
        return None
    value = int(raw)
    if not ID_MIN <= value <= ID_MAX:
        return None
    return value


def clean_deck_fields(name: str, description: str) -> Tuple[str, str]:
    return name.strip(), description.strip()


def content_problem(content: CardContent) -> Optional[str]:
    """Describe why a card payload is unusable, or None when it is fine."""
    if len(content.fields) != len(content.values):
        return "fields and values length mismatch"
    if not content.fields:
        return "fields and values are empty"
    if any(value == "" for value in content.values):
        return "empty value"
    return None
