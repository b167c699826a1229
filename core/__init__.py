"""Core blackjack rules and round engine - 100% UI-agnostic."""

from core.cards import Card, Rank, Suit
from core.hand import Pile, Role, decide_winner, score
from core.rules import TableRules

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "Pile",
    "Role",
    "TableRules",
    "decide_winner",
    "score",
]
