"""Blackjack round engine with state machine."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Literal, Protocol

from transitions import Machine

from core.errors import GameError
from core.hand import Pile, Role, decide_winner
from core.rules import TableRules
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.session import GameSession
from core.game.state import GameState

logger = logging.getLogger(__name__)

OutcomeReason = Literal["player_bust", "player_twenty_one", "dealer_bust", "showdown"]


class GameServer(Protocol):
    """The game server as the round engine uses it."""

    async def get_or_create(self, game_name: str) -> dict[str, Any]: ...

    async def draw(self, deck_id: str, role: Role) -> dict[str, Any]: ...

    async def end_game(self, game_name: str, winner: Role) -> dict[str, Any]: ...


class Display(Protocol):
    """Whatever shows the table to the player."""

    def render(self, session: GameSession) -> None: ...

    def clear(self) -> None: ...

    def notify(self, outcome: "RoundOutcome") -> None: ...


@dataclass(frozen=True)
class RoundOutcome:
    """How a round ended."""

    winner: Role
    player_score: int
    dealer_score: int
    reason: OutcomeReason

    @property
    def message(self) -> str:
        """Text shown to the player when the round ends."""
        if self.reason == "player_bust":
            return f"You lose, score = {self.player_score}"
        if self.reason == "player_twenty_one":
            return f"You win, score = {self.player_score}"
        verb = "win" if self.winner == Role.PLAYER else "lose"
        return f"You {verb}. {self.player_score} to {self.dealer_score}"


class BlackjackTable:
    """
    Client-side round controller using a state machine.

    Holds one explicit game session and drives it through the server:
    enter a game, hit or stand, let the dealer draw, record the winner,
    deal the next round. Communication with the presentation layer goes
    through the display and events only.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "enter_game", "source": "awaiting_entry", "dest": "player_turn"},
        {"trigger": "player_hit", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_stand", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "player_finished", "source": "player_turn", "dest": "round_resolved"},
        {"trigger": "dealer_finished", "source": "dealer_turn", "dest": "round_resolved"},
        {"trigger": "next_round", "source": "round_resolved", "dest": "player_turn"},
    ]

    def __init__(
        self,
        server: GameServer,
        display: Display,
        rules: TableRules | None = None,
    ) -> None:
        """
        Initialize a table waiting for a game name.

        Args:
            server: Client for the game server's routes
            display: Presentation target for the session
            rules: Dealer threshold and tie-break (defaults if not provided)
        """
        self.server = server
        self.display = display
        self.rules = rules or TableRules()
        self.session = GameSession()
        self.outcome: RoundOutcome | None = None
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="awaiting_entry",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current round state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def _require(self, state: GameState, action: str) -> bool:
        if self.state == state:
            return True
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=f"Cannot {action} in current state",
            state=self.state.name,
        )
        return False

    @asynccontextmanager
    async def _transition(self, action: str) -> AsyncIterator[None]:
        """Restore session and state if the wrapped remote work fails."""
        saved_session = self.session.copy()
        saved_state = self._machine_state  # type: ignore
        try:
            yield
        except (GameError, ValueError) as e:
            self.session = saved_session
            self.machine.set_state(saved_state, model=self)
            logger.warning("%s failed, staying in %s: %s", action, self.state.name, e)
            self.events.emit_new(
                EventType.TRANSITION_FAILED,
                action=action,
                state=self.state.name,
                error=str(e),
            )
            raise

    def _render(self) -> None:
        """Push the session to the display, then announce it."""
        self.display.render(self.session)
        self.events.emit_new(
            EventType.DISPLAY_UPDATED,
            player_score=self.session.player_score,
            dealer_score=self.session.dealer_score,
        )

    async def enter(self, game_name: str) -> bool:
        """
        Join an existing game or create a new one.

        Args:
            game_name: Name the game is stored under

        Returns:
            True if the game was entered
        """
        if not self._require(GameState.AWAITING_ENTRY, "enter a game"):
            return False

        game_name = game_name.strip()
        if not game_name:
            self.events.emit_new(EventType.INVALID_ACTION, message="Game name is required")
            return False

        async with self._transition("enter"):
            snapshot = await self.server.get_or_create(game_name)
            self.session = GameSession.from_snapshot(snapshot)
            self.enter_game()  # Trigger state transition

        logger.debug("Entered game %s on deck %s", self.session.game_name, self.session.deck_id)
        self.events.emit_new(
            EventType.GAME_ENTERED,
            game_name=self.session.game_name,
            games_won=self.session.games_won,
            games_lost=self.session.games_lost,
        )
        self._render()
        return True

    async def hit(self) -> bool:
        """Player takes one more card; a bust or 21 ends the round."""
        if not self._require(GameState.PLAYER_TURN, "hit"):
            return False

        async with self._transition("hit"):
            pile = await self._draw(Role.PLAYER)
            self.player_hit()  # Stay in player turn

        self.events.emit_new(EventType.PLAYER_HIT, hand_value=pile.score)
        self._render()
        await self._after_player_render()
        return True

    async def _after_player_render(self) -> None:
        """Check the player's total once the new card is on screen."""
        player_score = self.session.player_score

        if player_score > self.rules.blackjack_total:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=player_score)
            await self.end_round(Role.DEALER, "player_bust")
        elif player_score == self.rules.blackjack_total:
            self.events.emit_new(EventType.PLAYER_TWENTY_ONE, hand_value=player_score)
            await self.end_round(Role.PLAYER, "player_twenty_one")

    async def stand(self) -> bool:
        """Player stands; the dealer draws until reaching the stand threshold."""
        if not self._require(GameState.PLAYER_TURN, "stand"):
            return False

        async with self._transition("stand"):
            self.player_stand()  # Trigger state transition
            self.events.emit_new(EventType.PLAYER_STANDS, hand_value=self.session.player_score)

            # One card at a time, each scored and shown before the next
            while self.session.dealer_score < self.rules.dealer_stand_threshold:
                pile = await self._draw(Role.DEALER)
                self.events.emit_new(EventType.DEALER_HITS, hand_value=pile.score)
                self._render()

        dealer_score = self.session.dealer_score
        if dealer_score > self.rules.blackjack_total:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=dealer_score)
            reason: OutcomeReason = "dealer_bust"
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=dealer_score)
            reason = "showdown"

        winner = decide_winner(self.session.player_score, dealer_score, self.rules)
        await self.end_round(winner, reason)
        return True

    async def _draw(self, role: Role) -> Pile:
        """Draw one card into a pile and swap in the server's pile snapshot."""
        data = await self.server.draw(self.session.deck_id, role)
        pile = Pile.from_api(role, data)
        self.session.replace_pile(pile)
        self.events.emit_new(
            EventType.CARD_DRAWN,
            hand=role.value,
            card=str(pile.cards[-1]) if pile.cards else None,
            hand_value=pile.score,
        )
        return pile

    async def end_round(self, winner: Role, reason: OutcomeReason = "showdown") -> None:
        """
        Resolve the round for a winner, tell the player, and deal the next one.

        Args:
            winner: Role credited with the round
            reason: What decided it
        """
        if self.state not in (GameState.PLAYER_TURN, GameState.DEALER_TURN):
            self._require(GameState.PLAYER_TURN, "end the round")
            return

        self.outcome = RoundOutcome(
            winner=winner,
            player_score=self.session.player_score,
            dealer_score=self.session.dealer_score,
            reason=reason,
        )
        if self.state == GameState.PLAYER_TURN:
            self.player_finished()
        else:
            self.dealer_finished()

        logger.debug("Round resolved for %s (%s)", winner.value, reason)
        self.events.emit_new(
            EventType.ROUND_RESOLVED,
            winner=winner.value,
            reason=reason,
            player_score=self.outcome.player_score,
            dealer_score=self.outcome.dealer_score,
        )
        self.display.notify(self.outcome)

        await self.start_next_round()

    async def start_next_round(self) -> bool:
        """
        Record the resolved round on the server and load the fresh deal.

        Can be retried after a failure; the table stays resolved until it
        succeeds.
        """
        if not self._require(GameState.ROUND_RESOLVED, "start the next round"):
            return False
        if self.outcome is None:
            raise RuntimeError("Round resolved without an outcome")

        self.display.clear()
        try:
            async with self._transition("end game"):
                snapshot = await self.server.end_game(self.session.game_name, self.outcome.winner)
                self.session = GameSession.from_snapshot(snapshot)
                self.next_round()  # Trigger state transition
        except (GameError, ValueError):
            self.display.render(self.session)
            raise

        self.outcome = None
        self.events.emit_new(
            EventType.ROUND_STARTED,
            deck_id=self.session.deck_id,
            games_won=self.session.games_won,
            games_lost=self.session.games_lost,
        )
        self._render()
        return True
