"""Relational game store backed by SQLAlchemy's async engine."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import Integer, String

from config import config
from core.errors import GameNotFound, StoreUnavailable
from core.hand import Role

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class GameRecord(Base):
    """One row per named game: its current deck and running tally."""

    __tablename__ = "games"
    game_name = Column(String(255), primary_key=True)
    deck_id = Column(String(64), nullable=False)
    games_won = Column(Integer, nullable=False, default=0)
    games_lost = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"GameRecord({self.game_name!r}, deck={self.deck_id!r}, "
            f"won={self.games_won}, lost={self.games_lost})"
        )


class GameStore:
    """Find, create and update game rows."""

    def __init__(
        self,
        url: str | None = None,
        echo: bool | None = None,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._engine = engine or create_async_engine(
            url=url or config.database.url,
            echo=config.database.echo if echo is None else echo,
        )
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; any database failure becomes StoreUnavailable."""
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Game store error: %s", e)
            raise StoreUnavailable(f"Game store error: {e.__class__.__name__}") from e

    async def create_tables(self) -> None:
        """Create the games table if it does not exist."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("Could not create tables: %s", e)
            raise StoreUnavailable("Game store is unavailable") from e

    async def find_game(self, game_name: str) -> GameRecord | None:
        """Look a game up by its unique name."""
        async with self._session() as session:
            stmt = select(GameRecord).where(GameRecord.game_name == game_name)
            result = await session.execute(stmt)
            return result.scalars().first()

    async def create_game(self, game_name: str, deck_id: str) -> GameRecord:
        """
        Insert a new game with zeroed counters.

        If another request created the same name first, that row is
        returned instead.
        """
        async with self._session() as session:
            record = GameRecord(game_name=game_name, deck_id=deck_id, games_won=0, games_lost=0)
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.info("Game %s already exists, using stored row", game_name)
                existing = await session.get(GameRecord, game_name)
                if existing is None:
                    raise
                return existing
            logger.info("Created game %s with deck %s", game_name, deck_id)
            return record

    async def update_game(self, game_name: str, deck_id: str, winner: Role) -> GameRecord:
        """
        Bind a new deck and credit exactly one counter.

        Args:
            game_name: Game to update
            deck_id: Deck backing the next round
            winner: PLAYER increments games_won, DEALER increments games_lost

        Raises:
            GameNotFound: No game exists under that name
        """
        counter = GameRecord.games_won if winner == Role.PLAYER else GameRecord.games_lost

        async with self._session() as session:
            stmt = (
                update(GameRecord)
                .where(GameRecord.game_name == game_name)
                .values(deck_id=deck_id, **{counter.key: counter + 1})
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await session.rollback()
                raise GameNotFound(f"No game named {game_name!r}")
            await session.commit()

            return await self._reload(session, game_name)

    async def replace_deck(self, game_name: str, deck_id: str) -> GameRecord:
        """Bind a new deck to a game without touching its counters."""
        async with self._session() as session:
            stmt = update(GameRecord).where(GameRecord.game_name == game_name).values(deck_id=deck_id)
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await session.rollback()
                raise GameNotFound(f"No game named {game_name!r}")
            await session.commit()
            logger.info("Game %s moved to deck %s", game_name, deck_id)
            return await self._reload(session, game_name)

    async def _reload(self, session: AsyncSession, game_name: str) -> GameRecord:
        record = await session.get(GameRecord, game_name, populate_existing=True)
        if record is None:
            raise GameNotFound(f"Game {game_name!r} disappeared during update")
        return record

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self._engine.dispose()


# Global store instance
_game_store: GameStore | None = None


def get_game_store() -> GameStore:
    """Get or create the game store."""
    global _game_store
    if _game_store is None:
        _game_store = GameStore()
    return _game_store
