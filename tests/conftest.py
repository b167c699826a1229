"""Pytest fixtures for deckjack tests."""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.cards import Card, Rank, Suit
from core.errors import CardSourceUnavailable
from core.hand import Role

CARD_API_BASE = "https://cards.test/api/deck"

# Unshuffled order: 2C 3C 4C ... AC 2D ... AS
STANDARD_ORDER = [Card(rank, suit).code for suit in Suit for rank in Rank]


def make_cards(*codes: str) -> list[Card]:
    return [Card.from_string(code) for code in codes]


class FakeDeckService:
    """In-memory stand-in for the deck-of-cards HTTP API."""

    def __init__(self, order: list[str] | None = None) -> None:
        self.order = list(order or STANDARD_ORDER)
        self.decks: dict[str, dict] = {}
        self.decks_created = 0
        self.fail = False
        self.paths: list[str] = []

    @staticmethod
    def _card(code: str) -> dict[str, str]:
        card = Card.from_string(code)
        return {
            "code": code,
            "value": card.rank.value,
            "suit": card.suit.value,
            "image": f"https://cards.test/static/img/{code}.png",
        }

    @staticmethod
    def _ok(**data) -> httpx.Response:
        return httpx.Response(200, json={"success": True, **data})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        if self.fail:
            return httpx.Response(500, json={"success": False, "error": "service down"})

        parts = [p for p in request.url.path.split("/") if p][2:]
        if parts == ["new", "shuffle"]:
            self.decks_created += 1
            deck_id = f"deck{self.decks_created}"
            self.decks[deck_id] = {"cards": list(self.order), "piles": {}}
            return self._ok(deck_id=deck_id, shuffled=True, remaining=len(self.order))

        deck_id, *rest = parts
        deck = self.decks.get(deck_id)
        if deck is None:
            return httpx.Response(404, json={"success": False, "error": "Deck ID does not exist."})

        if rest == ["draw"]:
            count = int(request.url.params.get("count", "1"))
            drawn = [deck["cards"].pop(0) for _ in range(min(count, len(deck["cards"])))]
            return self._ok(
                deck_id=deck_id,
                cards=[self._card(code) for code in drawn],
                remaining=len(deck["cards"]),
            )

        if len(rest) == 3 and rest[0] == "pile":
            name, action = rest[1], rest[2]
            piles = deck["piles"]
            if action == "add":
                piles.setdefault(name, []).extend(request.url.params["cards"].split(","))
            elif action != "list":
                return httpx.Response(404, json={"success": False, "error": "Unknown pile action"})

            listing = {n: {"remaining": len(p)} for n, p in piles.items()}
            if action == "list" and name in piles:
                listing[name]["cards"] = [self._card(code) for code in piles[name]]
            return self._ok(deck_id=deck_id, remaining=len(deck["cards"]), piles=listing)

        return httpx.Response(404, json={"success": False, "error": "Not found"})


class FakeGameServer:
    """Scripted game server for driving the round engine."""

    def __init__(
        self,
        player: list[Card],
        dealer: list[Card],
        player_draws: list[Card] | None = None,
        dealer_draws: list[Card] | None = None,
        next_player: list[Card] | None = None,
        next_dealer: list[Card] | None = None,
    ) -> None:
        self.game_name = ""
        self.deck_number = 1
        self.games_won = 0
        self.games_lost = 0
        self.piles = {Role.PLAYER: list(player), Role.DEALER: list(dealer)}
        self.draws = {Role.PLAYER: list(player_draws or []), Role.DEALER: list(dealer_draws or [])}
        self.next_opening = (
            list(next_player or make_cards("2C", "4C")),
            list(next_dealer or make_cards("3C", "5C")),
        )
        self.fail: set[str] = set()
        self.calls: list[tuple] = []

    @property
    def deck_id(self) -> str:
        return f"deck{self.deck_number}"

    def _check(self, name: str) -> None:
        if name in self.fail:
            raise CardSourceUnavailable(f"{name} failed")

    def _pile(self, role: Role) -> dict:
        cards = self.piles[role]
        return {"remaining": len(cards), "cards": [c.to_api() for c in cards]}

    def _snapshot(self) -> dict:
        return {
            "gameName": self.game_name,
            "deckId": self.deck_id,
            "gamesWon": self.games_won,
            "gamesLost": self.games_lost,
            "playerPile": self._pile(Role.PLAYER),
            "dealerPile": self._pile(Role.DEALER),
            "scores": {},
        }

    async def get_or_create(self, game_name: str) -> dict:
        self.calls.append(("get_or_create", game_name))
        self._check("get_or_create")
        self.game_name = game_name
        return self._snapshot()

    async def draw(self, deck_id: str, role: Role) -> dict:
        self.calls.append(("draw", deck_id, role))
        self._check("draw")
        if not self.draws[role]:
            raise CardSourceUnavailable("deck exhausted")
        self.piles[role].append(self.draws[role].pop(0))
        return self._pile(role)

    async def end_game(self, game_name: str, winner: Role) -> dict:
        self.calls.append(("end_game", game_name, winner))
        self._check("end_game")
        if winner == Role.PLAYER:
            self.games_won += 1
        else:
            self.games_lost += 1
        self.deck_number += 1
        player, dealer = self.next_opening
        self.piles = {Role.PLAYER: list(player), Role.DEALER: list(dealer)}
        return self._snapshot()


class RecordingDisplay:
    """Display that remembers what it was asked to show."""

    def __init__(self) -> None:
        self.log: list[tuple] = []

    def render(self, session) -> None:
        self.log.append(("render", session.player_score, session.dealer_score, len(session.player_pile)))

    def clear(self) -> None:
        self.log.append(("clear",))

    def notify(self, outcome) -> None:
        self.log.append(("notify", outcome))

    @property
    def notifications(self) -> list:
        return [entry[1] for entry in self.log if entry[0] == "notify"]


@pytest.fixture
def cards():
    """Build cards from codes like 'KS', '0H', 'AD'."""
    return make_cards


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def make_server():
    """Factory for scripted game servers."""
    return FakeGameServer


@pytest.fixture
def deck_service():
    return FakeDeckService()


@pytest.fixture
def card_http(deck_service):
    """httpx client wired to the in-memory deck service."""
    return httpx.AsyncClient(
        transport=httpx.MockTransport(deck_service.handle),
        base_url=CARD_API_BASE,
    )


@pytest_asyncio.fixture
async def game_store(tmp_path):
    """A game store on a fresh SQLite file."""
    from api.store import GameStore

    store = GameStore(url=f"sqlite+aiosqlite:///{tmp_path / 'games.sqlite3'}")
    await store.create_tables()
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def card_source(card_http):
    from api.card_source import CardSource

    source = CardSource(client=card_http)
    yield source
    await source.aclose()


@pytest_asyncio.fixture
async def app_client(game_store, card_source):
    """API test client with the store and card source swapped for local ones."""
    from api.card_source import get_card_source
    from api.main import app
    from api.store import get_game_store

    app.dependency_overrides[get_game_store] = lambda: game_store
    app.dependency_overrides[get_card_source] = lambda: card_source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
