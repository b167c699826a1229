"""Round state enumeration."""

from enum import Enum, auto


class GameState(Enum):
    """
    Round state machine states.

    Flow: AWAITING_ENTRY → PLAYER_TURN → DEALER_TURN → ROUND_RESOLVED → PLAYER_TURN
    """

    # No game joined yet
    AWAITING_ENTRY = auto()

    # Player hits or stands
    PLAYER_TURN = auto()

    # Dealer draws to the stand threshold
    DEALER_TURN = auto()

    # Winner known, next round being dealt
    ROUND_RESOLVED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.AWAITING_ENTRY: [GameState.PLAYER_TURN],
    GameState.PLAYER_TURN: [GameState.PLAYER_TURN, GameState.DEALER_TURN, GameState.ROUND_RESOLVED],
    GameState.DEALER_TURN: [GameState.ROUND_RESOLVED],
    GameState.ROUND_RESOLVED: [GameState.PLAYER_TURN],
}


def is_valid_transition(from_state: GameState, to_state: GameState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
