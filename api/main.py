"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from api.card_source import get_card_source
from api.routes import game
from api.schemas import HealthResponse
from api.store import get_game_store
from config import config
from core.errors import GameError

logging.basicConfig(level=config.log_level)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}", "error": "rate_limited"},
    )


def _game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    """Turn store, card source and lookup failures into distinct responses."""
    logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.detail, exc.kind)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_game_store()
    await store.create_tables()
    logger.info("Game store ready")
    yield
    await get_card_source().aclose()
    await store.dispose()
    logger.info("Stop server")


app = FastAPI(
    title="Deckjack",
    description="Blackjack game server backed by a deck-of-cards service",
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(GameError, _game_error_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Include routers
app.include_router(game.router, prefix="/game", tags=["game"])

# Mount static files (must be last since it's a catch-all)
frontend_path = Path(__file__).parent.parent / "frontend"
if frontend_path.exists():
    app.mount("/", StaticFiles(directory=str(frontend_path), html=True), name="static")


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=config.host, port=config.port, reload=config.debug)
