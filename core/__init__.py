"""Escrowed blackjack core - cards, hand evaluation and the game ledger."""

from core.cards import Card, Deck, Rank, Suit
from core.hand import Hand, HandValue, Outcome, evaluate, determine_outcome
from core.rules import TableRules

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "HandValue",
    "Outcome",
    "evaluate",
    "determine_outcome",
    "TableRules",
]
