from .deck import Deck, DeckCreate, DeckSummary, new_deck
from .card import Card, CardContent, CardCreate, CardRead, new_card

__all__ = ['Deck', 'DeckCreate', 'DeckSummary', 'new_deck', 'Card', 'CardContent', 'CardCreate', 'CardRead', 'new_card']
