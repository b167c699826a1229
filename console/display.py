"""Terminal rendering of the table."""

import sys
from typing import TextIO

from core.cards import Card
from core.game.engine import RoundOutcome
from core.game.session import GameSession
from core.hand import Pile


def card_label(card: Card) -> str:
    """Text for one card, e.g. '10 of SPADES'."""
    return f"{card.rank} of {card.suit}"


def pile_lines(title: str, pile: Pile, score: int) -> list[str]:
    lines = [f"{title} ({score})"]
    lines.extend(f"  {card_label(card)}" for card in pile.cards)
    return lines


class ConsoleDisplay:
    """Writes the table to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def _write(self, text: str = "") -> None:
        self._stream.write(text + "\n")
        self._stream.flush()

    def render(self, session: GameSession) -> None:
        """Show both piles, their scores, and the running tally."""
        self._write()
        for line in pile_lines("Dealer", session.dealer_pile, session.dealer_score):
            self._write(line)
        for line in pile_lines("Player", session.player_pile, session.player_score):
            self._write(line)
        self._write(banner(session))

    def clear(self) -> None:
        self._write("-" * 32)

    def notify(self, outcome: RoundOutcome) -> None:
        self._write(f"*** {outcome.message} ***")


def banner(session: GameSession) -> str:
    return f"Games Won: {session.games_won}, Games Lost: {session.games_lost}"
