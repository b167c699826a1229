"""Client for the external deck-of-cards service."""

import logging
from typing import Any

import httpx

from config import config
from core.errors import CardSourceUnavailable, GameNotFound
from core.hand import Role

logger = logging.getLogger(__name__)


class CardSource:
    """
    Thin async wrapper over the deck-of-cards HTTP API.

    The service owns shuffling, drawing and piles; this class only forwards
    requests and turns failures into CardSourceUnavailable.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = (endpoint or config.card_source.endpoint).rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._endpoint,
            timeout=timeout or config.card_source.timeout,
        )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a service path and return its JSON body."""
        logger.debug("Card source GET %s %s", path, params or "")
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise CardSourceUnavailable(f"Card service request failed: {e}") from e

        if response.status_code == 404:
            raise GameNotFound(f"Card service has no deck at {path}")
        if response.is_error:
            raise CardSourceUnavailable(f"Card service returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CardSourceUnavailable("Card service returned malformed JSON") from e

        if not isinstance(data, dict):
            raise CardSourceUnavailable("Card service returned an unexpected payload")
        if not data.get("success", True):
            raise CardSourceUnavailable(data.get("error") or "Card service reported failure")
        return data

    async def new_deck(self) -> str:
        """Shuffle a fresh single deck and return its id."""
        data = await self._get("/new/shuffle/", params={"deck_count": 1})
        try:
            return str(data["deck_id"])
        except KeyError:
            raise CardSourceUnavailable("Card service did not return a deck id") from None

    async def draw_one(self, deck_id: str) -> dict[str, Any]:
        """Draw the top card of a deck."""
        data = await self._get(f"/{deck_id}/draw/", params={"count": 1})
        cards = data.get("cards") or []
        if not cards:
            raise CardSourceUnavailable(f"Deck {deck_id} has no cards left")
        return cards[0]

    async def add_to_pile(self, deck_id: str, role: Role, card_code: str) -> None:
        """Place a drawn card into a named pile."""
        await self._get(f"/{deck_id}/pile/{role.value}/add/", params={"cards": card_code})

    async def list_pile(self, deck_id: str, role: Role) -> dict[str, Any]:
        """
        List the cards in a pile, in the order they were added.

        A pile nothing has been added to yet is empty.
        """
        data = await self._get(f"/{deck_id}/pile/{role.value}/list/")
        piles = data.get("piles") or {}
        pile = piles.get(role.value) or {}
        return {"remaining": pile.get("remaining", 0), "cards": pile.get("cards", [])}

    async def draw_to_pile(self, deck_id: str, role: Role) -> dict[str, Any]:
        """Draw one card and add it to a pile; returns the card."""
        card = await self.draw_one(deck_id)
        try:
            code = card["code"]
        except (KeyError, TypeError):
            raise CardSourceUnavailable("Card service returned a card without a code") from None
        await self.add_to_pile(deck_id, role, code)
        return card

    async def deal_opening_hand(self, deck_id: str) -> None:
        """Deal two cards each, alternating player and dealer."""
        for role in (Role.PLAYER, Role.DEALER, Role.PLAYER, Role.DEALER):
            await self.draw_to_pile(deck_id, role)

    async def aclose(self) -> None:
        await self._client.aclose()


# Global card source instance
_card_source: CardSource | None = None


def get_card_source() -> CardSource:
    """Get or create the card source."""
    global _card_source
    if _card_source is None:
        _card_source = CardSource()
    return _card_source
