"""Game API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from api.card_source import CardSource, get_card_source
from api.schemas import ErrorResponse, GameSnapshotResponse, PileResponse
from api.store import GameRecord, GameStore, get_game_store
from core.errors import CardSourceUnavailable, GameNotFound
from core.hand import Role

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)

StoreDep = Annotated[GameStore, Depends(get_game_store)]
CardsDep = Annotated[CardSource, Depends(get_card_source)]


async def _pile(cards: CardSource, deck_id: str, role: Role) -> PileResponse:
    return PileResponse.model_validate(await cards.list_pile(deck_id, role))


async def _piles(cards: CardSource, deck_id: str) -> tuple[PileResponse, PileResponse]:
    """Player and dealer piles of a deck."""
    return await _pile(cards, deck_id, Role.PLAYER), await _pile(cards, deck_id, Role.DEALER)


async def _deal_round(cards: CardSource) -> tuple[str, PileResponse, PileResponse]:
    """
    Shuffle a fresh deck and deal the opening hand.

    Nothing is stored here, so a failure leaves no trace in the game table.
    """
    deck_id = await cards.new_deck()
    await cards.deal_opening_hand(deck_id)
    player_pile, dealer_pile = await _piles(cards, deck_id)
    return deck_id, player_pile, dealer_pile


def _snapshot(
    record: GameRecord,
    player_pile: PileResponse,
    dealer_pile: PileResponse,
) -> GameSnapshotResponse:
    return GameSnapshotResponse(
        game_name=record.game_name,
        deck_id=record.deck_id,
        games_won=record.games_won,
        games_lost=record.games_lost,
        dealer_pile=dealer_pile,
        player_pile=player_pile,
    )


async def _stored_snapshot(record: GameRecord, cards: CardSource) -> GameSnapshotResponse:
    """Combine a stored game with both of its live piles."""
    player_pile, dealer_pile = await _piles(cards, record.deck_id)
    return _snapshot(record, player_pile, dealer_pile)


@router.get("/{game_name}/getOrCreate")
async def get_or_create_game(
    game_name: str,
    store: StoreDep,
    cards: CardsDep,
) -> GameSnapshotResponse:
    """Return a game, creating it with a fresh deck and opening deal if new."""
    record = await store.find_game(game_name)
    if record is None:
        deck_id, player_pile, dealer_pile = await _deal_round(cards)
        record = await store.create_game(game_name, deck_id)
        if record.deck_id == deck_id:
            logger.info("New game %s", game_name)
            return _snapshot(record, player_pile, dealer_pile)

    try:
        return await _stored_snapshot(record, cards)
    except GameNotFound:
        logger.warning("Deck %s of game %s is gone, dealing a new one", record.deck_id, game_name)

    deck_id, player_pile, dealer_pile = await _deal_round(cards)
    record = await store.replace_deck(game_name, deck_id)
    return _snapshot(record, player_pile, dealer_pile)


@router.get("/{deck_id}/draw/{role}")
async def draw_card(
    deck_id: str,
    role: Role,
    cards: CardsDep,
) -> PileResponse:
    """Draw one card into a pile and return the whole pile."""
    await cards.draw_to_pile(deck_id, role)
    return await _pile(cards, deck_id, role)


@router.get("/{game_name}/endGame/{winner}")
async def end_game(
    game_name: str,
    winner: Role,
    store: StoreDep,
    cards: CardsDep,
) -> GameSnapshotResponse:
    """Deal the next round from a fresh deck, then record the winner."""
    if await store.find_game(game_name) is None:
        raise GameNotFound(f"No game named {game_name!r}")

    # The counter moves only once the next round is fully dealt
    deck_id, player_pile, dealer_pile = await _deal_round(cards)
    record = await store.update_game(game_name, deck_id, winner)
    logger.info(
        "Game %s round to %s (won=%d, lost=%d)",
        game_name,
        winner.value,
        record.games_won,
        record.games_lost,
    )

    return _snapshot(record, player_pile, dealer_pile)


@router.get("/{game_name}")
async def get_game(
    game_name: str,
    store: StoreDep,
    cards: CardsDep,
) -> GameSnapshotResponse:
    """Return an existing game without creating one."""
    record = await store.find_game(game_name)
    if record is None:
        raise GameNotFound(f"No game named {game_name!r}")
    try:
        return await _stored_snapshot(record, cards)
    except GameNotFound as e:
        raise CardSourceUnavailable(f"Deck {record.deck_id} of game {game_name!r} is gone") from e
