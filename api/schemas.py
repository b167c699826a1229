"""Pydantic schemas for API responses."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CardResponse(BaseModel):
    """Card as the card service reports it."""

    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    value: str
    suit: str
    image: str | None = None


class PileResponse(BaseModel):
    """A pile's cards, in draw order."""

    remaining: int | None = None
    cards: list[CardResponse] = []


class GameSnapshotResponse(BaseModel):
    """Full game state sent to the client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    game_name: str
    deck_id: str
    games_won: int
    games_lost: int
    dealer_pile: PileResponse
    player_pile: PileResponse
    # Always empty; the client scores the piles itself
    scores: dict[str, int] = {}


class ErrorResponse(BaseModel):
    """Error body for failed game requests."""

    detail: str
    error: str


class HealthResponse(BaseModel):
    status: str
