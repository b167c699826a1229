"""Pile evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator

from core.cards import Card
from core.rules import TableRules

BLACKJACK = 21


class Role(str, Enum):
    """The two seats at the table; also the card service pile names."""

    PLAYER = "player"
    DEALER = "dealer"

    def __str__(self) -> str:
        return self.value


def score(cards: Iterable[Card]) -> int:
    """
    Calculate the best blackjack total for a sequence of cards.

    Aces start at 11 and are dropped to 1, one at a time, while the total
    is over 21. Returns the highest total that doesn't bust, or the lowest
    bust total.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass
class Pile:
    """A player's or dealer's hand, in draw order."""

    role: Role
    cards: list[Card] = field(default_factory=list)
    remaining: int | None = None

    def add_card(self, card: Card) -> None:
        """Append a drawn card."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the pile."""
        self.cards.clear()

    @property
    def score(self) -> int:
        """Best total for the pile."""
        return score(self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the pile is soft (has an ace counted as 11).
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the pile has busted (total > 21)."""
        return self.score > BLACKJACK

    @property
    def is_twenty_one(self) -> bool:
        return self.score == BLACKJACK

    @classmethod
    def from_api(cls, role: Role | str, data: dict[str, Any] | None) -> "Pile":
        """
        Build a pile from the card service's pile listing.

        A missing pile (nothing drawn into it yet) is empty.
        """
        data = data or {}
        cards = [Card.from_api(c) for c in data.get("cards", [])]
        return cls(role=Role(role), cards=cards, remaining=data.get("remaining"))

    def to_api(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"cards": [c.to_api() for c in self.cards]}
        if self.remaining is not None:
            payload["remaining"] = self.remaining
        return payload

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = ", ".join(str(card) for card in self.cards)
        value_str = f"({self.score})"
        if self.is_soft:
            value_str = f"(soft {self.score})"
        if self.is_busted:
            value_str = f"(BUST {self.score})"
        return f"{self.role}: {cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Pile({self.role.value}, {self.cards!r}, score={self.score})"


def decide_winner(
    player_score: int,
    dealer_score: int,
    rules: TableRules | None = None,
) -> Role:
    """
    Decide a round after the dealer has finished drawing.

    The player wins when the dealer busts or finishes strictly below the
    player. Equal totals go to the dealer unless the rules say otherwise.
    """
    rules = rules or TableRules()

    if dealer_score > rules.blackjack_total:
        return Role.PLAYER
    if dealer_score < player_score:
        return Role.PLAYER
    if dealer_score == player_score and not rules.ties_go_to_dealer:
        return Role.PLAYER
    return Role.DEALER
