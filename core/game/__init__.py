"""Round engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import GameState
from core.game.session import GameSession
from core.game.engine import BlackjackTable, RoundOutcome

__all__ = [
    "GameEvent",
    "EventType",
    "GameState",
    "GameSession",
    "BlackjackTable",
    "RoundOutcome",
]
