"""Tests for the deck-of-cards client."""

import httpx
import pytest

from api.card_source import CardSource
from core.errors import CardSourceUnavailable, GameNotFound
from core.hand import Role

from conftest import CARD_API_BASE


def _source(handler) -> CardSource:
    return CardSource(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=CARD_API_BASE)
    )


@pytest.mark.asyncio
async def test_new_deck(card_source, deck_service):
    deck_id = await card_source.new_deck()

    assert deck_id == "deck1"
    assert deck_service.paths == ["/api/deck/new/shuffle/"]


@pytest.mark.asyncio
async def test_draw_to_pile(card_source, deck_service):
    deck_id = await card_source.new_deck()

    card = await card_source.draw_to_pile(deck_id, Role.DEALER)

    assert card["code"] == "2C"
    assert deck_service.decks[deck_id]["piles"] == {"dealer": ["2C"]}


@pytest.mark.asyncio
async def test_opening_hand_alternates(card_source, deck_service):
    deck_id = await card_source.new_deck()

    await card_source.deal_opening_hand(deck_id)

    piles = deck_service.decks[deck_id]["piles"]
    assert piles["player"] == ["2C", "4C"]
    assert piles["dealer"] == ["3C", "5C"]


@pytest.mark.asyncio
async def test_list_pile(card_source):
    deck_id = await card_source.new_deck()
    await card_source.deal_opening_hand(deck_id)

    pile = await card_source.list_pile(deck_id, Role.PLAYER)

    assert pile["remaining"] == 2
    assert [c["code"] for c in pile["cards"]] == ["2C", "4C"]


@pytest.mark.asyncio
async def test_list_empty_pile(card_source):
    deck_id = await card_source.new_deck()

    pile = await card_source.list_pile(deck_id, Role.PLAYER)

    assert pile == {"remaining": 0, "cards": []}


@pytest.mark.asyncio
async def test_unknown_deck(card_source):
    with pytest.raises(GameNotFound):
        await card_source.draw_one("missing")


@pytest.mark.asyncio
async def test_server_error(card_source, deck_service):
    deck_service.fail = True
    with pytest.raises(CardSourceUnavailable):
        await card_source.new_deck()


@pytest.mark.asyncio
async def test_connection_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    source = _source(handler)
    with pytest.raises(CardSourceUnavailable):
        await source.new_deck()
    await source.aclose()


@pytest.mark.asyncio
async def test_unsuccessful_payload():
    def handler(request):
        return httpx.Response(200, json={"success": False, "error": "Not enough cards remaining"})

    source = _source(handler)
    with pytest.raises(CardSourceUnavailable, match="Not enough cards"):
        await source.draw_one("deck1")
    await source.aclose()


@pytest.mark.asyncio
async def test_malformed_json():
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    source = _source(handler)
    with pytest.raises(CardSourceUnavailable):
        await source.new_deck()
    await source.aclose()


@pytest.mark.asyncio
async def test_exhausted_deck():
    def handler(request):
        return httpx.Response(200, json={"success": True, "cards": [], "remaining": 0})

    source = _source(handler)
    with pytest.raises(CardSourceUnavailable):
        await source.draw_one("deck1")
    await source.aclose()
