"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["GET"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class DatabaseConfig:
    """Relational game store configuration."""

    url: str = field(
        default_factory=lambda: os.getenv(
            "DATABASE_URL", "sqlite+aiosqlite:///./deckjack.sqlite3"
        )
    )
    echo: bool = field(default_factory=lambda: _env_flag("DATABASE_ECHO", "false"))


@dataclass(frozen=True)
class CardSourceConfig:
    """Deck-of-cards service configuration."""

    endpoint: str = field(
        default_factory=lambda: os.getenv(
            "CARD_API_ENDPOINT", "https://deckofcardsapi.com/api/deck"
        ).rstrip("/")
    )
    timeout: float = field(
        default_factory=lambda: float(os.getenv("CARD_API_TIMEOUT", "10"))
    )


@dataclass(frozen=True)
class GameConfig:
    """Default table rules."""

    dealer_stand_threshold: int = field(
        default_factory=lambda: int(os.getenv("DEALER_STAND_THRESHOLD", "17"))
    )
    ties_go_to_dealer: bool = field(
        default_factory=lambda: _env_flag("TIES_GO_TO_DEALER", "true")
    )


@dataclass(frozen=True)
class ClientConfig:
    """Console client configuration."""

    server_url: str = field(
        default_factory=lambda: os.getenv("DECKJACK_SERVER_URL", "http://localhost:8000").rstrip("/")
    )
    timeout: float = field(
        default_factory=lambda: float(os.getenv("DECKJACK_CLIENT_TIMEOUT", "30"))
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    card_source: CardSourceConfig = field(default_factory=CardSourceConfig)
    game: GameConfig = field(default_factory=GameConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


# Global configuration instance
config = AppConfig()
