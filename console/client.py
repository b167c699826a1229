"""HTTP client for the game server, used by the round engine."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from config import config
from core.errors import ERROR_KINDS, GameError, ServerUnavailable
from core.hand import Role

logger = logging.getLogger(__name__)


def _error_from_response(response: httpx.Response) -> GameError:
    """Rebuild the server's error as the matching exception."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    detail = str(body.get("detail") or f"Server returned {response.status_code}")
    error_cls = ERROR_KINDS.get(body.get("error", ""))
    if error_cls is None:
        error_cls = next(
            (cls for cls in ERROR_KINDS.values() if cls.status_code == response.status_code),
            ServerUnavailable,
        )
    return error_cls(detail)


class GameServerClient:
    """Async client for the /game routes."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url or config.client.server_url,
            timeout=timeout or config.client.timeout,
        )

    async def _get(self, path: str) -> dict[str, Any]:
        logger.debug("GET %s", path)
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            raise ServerUnavailable(f"Game server request failed: {e}") from e

        if response.is_error:
            raise _error_from_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise ServerUnavailable("Game server returned malformed JSON") from e
        if not isinstance(data, dict):
            raise ServerUnavailable("Game server returned an unexpected payload")
        return data

    async def get_or_create(self, game_name: str) -> dict[str, Any]:
        return await self._get(f"/game/{quote(game_name, safe='')}/getOrCreate")

    async def draw(self, deck_id: str, role: Role) -> dict[str, Any]:
        return await self._get(f"/game/{deck_id}/draw/{role.value}")

    async def end_game(self, game_name: str, winner: Role) -> dict[str, Any]:
        return await self._get(f"/game/{quote(game_name, safe='')}/endGame/{winner.value}")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GameServerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
