"""Per-game session state held by the client."""

from dataclasses import dataclass, field, replace
from typing import Any

from core.hand import Pile, Role


@dataclass
class GameSession:
    """
    The active game as the client sees it.

    Built wholesale from a server snapshot; ``scores`` is derived from the
    piles and never taken from the server.
    """

    game_name: str = ""
    deck_id: str = ""
    games_won: int = 0
    games_lost: int = 0
    player_pile: Pile = field(default_factory=lambda: Pile(Role.PLAYER))
    dealer_pile: Pile = field(default_factory=lambda: Pile(Role.DEALER))
    scores: dict[Role, int] = field(default_factory=dict)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "GameSession":
        """Build a session from a full game snapshot and score both piles."""
        try:
            session = cls(
                game_name=data["gameName"],
                deck_id=data["deckId"],
                games_won=int(data["gamesWon"]),
                games_lost=int(data["gamesLost"]),
                player_pile=Pile.from_api(Role.PLAYER, data.get("playerPile")),
                dealer_pile=Pile.from_api(Role.DEALER, data.get("dealerPile")),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed game snapshot: missing {e}") from None
        session.rescore()
        return session

    def pile(self, role: Role) -> Pile:
        return self.player_pile if role == Role.PLAYER else self.dealer_pile

    def replace_pile(self, pile: Pile) -> None:
        """Swap in a fresh pile snapshot and rescore that role."""
        if pile.role == Role.PLAYER:
            self.player_pile = pile
        else:
            self.dealer_pile = pile
        self.scores[pile.role] = pile.score

    def rescore(self) -> None:
        """Recompute both scores from the current piles."""
        self.scores[Role.PLAYER] = self.player_pile.score
        self.scores[Role.DEALER] = self.dealer_pile.score

    @property
    def player_score(self) -> int:
        return self.scores.get(Role.PLAYER, 0)

    @property
    def dealer_score(self) -> int:
        return self.scores.get(Role.DEALER, 0)

    def copy(self) -> "GameSession":
        """Independent copy; cards are immutable so only the lists are copied."""
        return replace(
            self,
            player_pile=replace(self.player_pile, cards=list(self.player_pile.cards)),
            dealer_pile=replace(self.dealer_pile, cards=list(self.dealer_pile.cards)),
            scores=dict(self.scores),
        )
