"""Tests for terminal rendering."""

import io

from console.display import ConsoleDisplay, banner
from core.game import GameSession, RoundOutcome
from core.hand import Role


def _session():
    return GameSession.from_snapshot(
        {
            "gameName": "t",
            "deckId": "deck1",
            "gamesWon": 3,
            "gamesLost": 4,
            "playerPile": {"cards": [{"value": "0", "suit": "SPADES"}, {"value": "ACE", "suit": "HEARTS"}]},
            "dealerPile": {"cards": [{"value": "KING", "suit": "CLUBS"}]},
            "scores": {"player": 99},
        }
    )


def test_snapshot_scores_are_recomputed():
    session = _session()
    assert session.player_score == 21
    assert session.dealer_score == 10


def test_render():
    stream = io.StringIO()
    ConsoleDisplay(stream).render(_session())
    text = stream.getvalue()

    assert "Dealer (10)" in text
    assert "KING of CLUBS" in text
    assert "Player (21)" in text
    assert "10 of SPADES" in text
    assert "Games Won: 3, Games Lost: 4" in text


def test_notify():
    stream = io.StringIO()
    outcome = RoundOutcome(winner=Role.PLAYER, player_score=20, dealer_score=18, reason="showdown")

    ConsoleDisplay(stream).notify(outcome)

    assert "You win. 20 to 18" in stream.getvalue()


def test_banner():
    assert banner(_session()) == "Games Won: 3, Games Lost: 4"
