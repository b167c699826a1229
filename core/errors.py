"""Errors shared by the server and the client."""


class GameError(Exception):
    """Base class for failures a round transition can hit."""

    status_code = 500
    kind = "game_error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.__class__.__name__)
        self.detail = detail or self.__class__.__name__


class GameNotFound(GameError):
    """No game (or deck) exists under the requested name."""

    status_code = 404
    kind = "not_found"


class StoreUnavailable(GameError):
    """The relational game store could not be reached or failed a query."""

    status_code = 503
    kind = "store_unavailable"


class CardSourceUnavailable(GameError):
    """The deck-of-cards service failed or returned something unusable."""

    status_code = 502
    kind = "card_source_unavailable"


class ServerUnavailable(GameError):
    """The game server itself could not be reached."""

    status_code = 503
    kind = "server_unavailable"


ERROR_KINDS: dict[str, type[GameError]] = {
    cls.kind: cls
    for cls in (GameNotFound, StoreUnavailable, CardSourceUnavailable, ServerUnavailable)
}
