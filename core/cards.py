"""Card, Rank, and Suit classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Suit(Enum):
    """Card suits, valued by the names the card service uses."""

    CLUBS = "CLUBS"
    DIAMONDS = "DIAMONDS"
    HEARTS = "HEARTS"
    SPADES = "SPADES"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Card ranks, valued by the names the card service uses."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "JACK"
    QUEEN = "QUEEN"
    KING = "KING"
    ACE = "ACE"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def code(self) -> str:
        """Single-character code used in card codes (0 for ten)."""
        if self == Rank.TEN:
            return "0"
        return self.value[0]

    @classmethod
    def parse(cls, value: Any) -> "Rank":
        """
        Parse a rank from the card service's value field.

        The service reports tens as either "10" or "0"; both map to TEN.
        """
        text = str(value).strip().upper()
        if text == "0":
            return cls.TEN
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Invalid rank: {value!r}") from None


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank} of {self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def code(self) -> str:
        """Return the two-character card code, e.g. 'AS' or '0H'."""
        return f"{self.rank.code}{self.suit.value[0]}"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Card":
        """Create a card from a card service entry like {"value": "KING", "suit": "HEARTS"}."""
        try:
            value = data["value"]
            suit = data["suit"]
        except (KeyError, TypeError):
            raise ValueError(f"Invalid card payload: {data!r}") from None

        try:
            suit_enum = Suit(str(suit).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid suit: {suit!r}") from None

        return cls(Rank.parse(value), suit_enum)

    def to_api(self) -> dict[str, str]:
        """Serialize in the card service's shape."""
        return {"code": self.code, "value": self.rank.value, "suit": self.suit.value}

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a code like 'AS', '0H', '10D' or 'Kc'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {rank.code: rank for rank in Rank}
        rank_map["10"] = Rank.TEN
        rank_map["T"] = Rank.TEN
        suit_map = {suit.value[0]: suit for suit in Suit}

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])
