"""
Database - Card Store I/O Operations

Registers cards and answers "what is due today" queries against the
embedded SQLite file. Uses SQLAlchemy's asyncio extension over aiosqlite.

This module handles ONLY database I/O.
Scheduling updates are written by the external scheduler.
"""

from __future__ import annotations

import copy
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Mapping, Optional, Sequence, TypeVar

from sqlalchemy import func, inspect, insert, or_, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from repeat.store.config import StoreConfig
from repeat.store.constants import TABLE_NAME
from repeat.store.errors import InitializationError, StorageError
from repeat.store.models import Base, CardRecord
from repeat.store.schemas import CardLike, CardReviewState

logger = logging.getLogger(__name__)

CardT = TypeVar("CardT", bound=CardLike)


def get_engine(db_path: Path, config: StoreConfig) -> AsyncEngine:
    """
    Get an async SQLAlchemy engine for the database file.

    The pool is fixed at config.pool_size connections with no overflow,
    so extra callers queue for a connection.

    Args:
        db_path: Path to the SQLite file (created on first connect)
        config: Store configuration

    Returns:
        AsyncEngine instance
    """
    return create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=config.pool_size,
        max_overflow=0,
        echo=config.echo,
    )


def probe_schema_exists(sync_conn: Connection) -> bool:
    """Check the SQLite catalog for the cards table."""
    return inspect(sync_conn).has_table(TABLE_NAME)


def new_record(card_hash: str, added_at: str):
    """INSERT for a freshly registered card: nothing scheduled, due now."""
    return insert(CardRecord).values(
        card_hash=card_hash,
        added_at=added_at,
        last_reviewed_at=None,
        stability=None,
        difficulty=None,
        interval_raw=None,
        interval_days=0,
        due_date=None,
        review_count=0,
    )


async def _count_hash(conn: AsyncConnection, card_hash: str) -> int:
    result = await conn.execute(
        select(func.count()).select_from(CardRecord).where(CardRecord.card_hash == card_hash)
    )
    return result.scalar_one()


class CardStore:
    """
    Durable registry of cards and their spaced-repetition state.

    Construct with `await CardStore.open(config)`; the store owns the
    engine and its connection pool until close() is called.
    """

    def __init__(self, engine: AsyncEngine, db_path: Path):
        self._engine: Optional[AsyncEngine] = engine
        self.db_path = db_path

    # ---- Lifecycle ----

    @classmethod
    async def open(cls, config: Optional[StoreConfig] = None) -> CardStore:
        """
        Open (or create) the card database and make sure the schema exists.

        Safe to call multiple times against the same directory - the table
        is only created when the catalog probe does not find it. The probe
        and the create are not locked; open the store once per process.

        Args:
            config: Store configuration (default: StoreConfig.from_env())

        Returns:
            Ready-to-use CardStore

        Raises:
            InitializationError: directory, file, or schema could not be prepared
        """
        try:
            if config is None:
                config = StoreConfig.from_env()
        except ValueError as exc:
            # pydantic's ValidationError is a ValueError too
            raise InitializationError(f"Invalid store configuration: {exc}") from exc

        try:
            data_dir = config.resolve_data_dir()
        except RuntimeError as exc:
            # No home directory, or an unknown ~user
            raise InitializationError(f"Could not determine data directory: {exc}") from exc

        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InitializationError(f"Failed to create data directory: {exc}") from exc

        db_path = data_dir / config.db_filename
        engine = get_engine(db_path, config)

        try:
            async with engine.connect() as conn:
                table_exists = await conn.run_sync(probe_schema_exists)

            if not table_exists:
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all, checkfirst=False)
                logger.info("Created %s schema in %s", TABLE_NAME, db_path)
        except SQLAlchemyError as exc:
            await engine.dispose()
            logger.error("Could not initialize card database at %s: %s", db_path, exc)
            raise InitializationError(f"Failed to initialize database {db_path}: {exc}") from exc

        logger.info("Opened card store at %s", db_path)
        return cls(engine, db_path)

    async def close(self) -> None:
        """Dispose of the connection pool. Calling twice is harmless."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    async def __aenter__(self) -> CardStore:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def engine(self) -> AsyncEngine:
        """The underlying engine; raises StorageError once the store is closed."""
        if self._engine is None:
            raise StorageError("Card store is closed")
        return self._engine

    # ---- Registration ----

    async def add_card(self, card: CardLike) -> None:
        """
        Register a single card. Does nothing if it is already stored.

        The existence check and the insert are separate statements, so two
        callers registering the same card at once can collide on the primary
        key; that surfaces as StorageError.

        Args:
            card: Card to register (only card_hash is stored)
        """
        if await self.card_exists(card):
            return

        now = datetime.now(timezone.utc).isoformat()
        try:
            async with self.engine.begin() as conn:
                await conn.execute(new_record(card.card_hash, now))
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to add card {card.card_hash}: {exc}") from exc

        logger.debug("Registered card %s", card.card_hash)

    async def add_cards_batch(self, cards: Sequence[CardLike]) -> None:
        """
        Register many cards in a single database transaction.

        Cards already stored (or repeated earlier in the same batch) are
        skipped. Every card inserted by one call shares the same added_at.
        If anything fails, the transaction is rolled back and none of the
        batch is stored.

        Args:
            cards: Cards to register, in order
        """
        if not cards:
            return

        now = datetime.now(timezone.utc).isoformat()
        inserted = 0
        try:
            async with self.engine.begin() as conn:
                for card in cards:
                    if await _count_hash(conn, card.card_hash) > 0:
                        continue

                    await conn.execute(new_record(card.card_hash, now))
                    inserted += 1
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to add batch of {len(cards)} cards: {exc}") from exc

        logger.debug("Batch registered %d new cards (%d already stored)", inserted, len(cards) - inserted)

    # ---- Queries ----

    async def card_exists(self, card: CardLike) -> bool:
        """Check whether a record with this card's hash is stored."""
        try:
            async with self.engine.connect() as conn:
                count = await _count_hash(conn, card.card_hash)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to look up card {card.card_hash}: {exc}") from exc

        return count > 0

    async def due_today(
        self,
        card_hashes: Mapping[str, CardT],
        card_limit: Optional[int] = None
    ) -> list[CardT]:
        """
        Get the cards due for review today.

        A record is due when its due_date is on or before today's local date,
        or when it has never been scheduled (due_date is NULL). Records whose
        hash is missing from card_hashes are skipped - the caller no longer
        knows that card.

        Args:
            card_hashes: Catalog of every known card, keyed by card_hash
            card_limit: Maximum number of cards to return (default: no limit)

        Returns:
            Copies of the due cards, in database order
        """
        if card_limit is not None and card_limit <= 0:
            return []

        today = date.today()
        stmt = select(CardRecord.card_hash).where(
            or_(CardRecord.due_date <= today, CardRecord.due_date.is_(None))
        )

        cards: list[CardT] = []
        unknown = 0
        try:
            async with self.engine.connect() as conn:
                result = await conn.stream(stmt)
                async for card_hash in result.scalars():
                    if card_hash not in card_hashes:
                        unknown += 1
                        continue

                    cards.append(copy.deepcopy(card_hashes[card_hash]))

                    if card_limit is not None and len(cards) >= card_limit:
                        break
                await result.close()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to query due cards: {exc}") from exc

        logger.debug("%d cards due on %s (%d unknown hashes skipped)", len(cards), today, unknown)
        return cards

    async def get_card_record(self, card: CardLike) -> Optional[CardReviewState]:
        """
        Load the stored review record for a card.

        Returns:
            CardReviewState if registered, None otherwise
        """
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(
                    select(CardRecord.__table__).where(CardRecord.card_hash == card.card_hash)
                )
                row = result.mappings().first()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load card {card.card_hash}: {exc}") from exc

        if row is None:
            return None
        return CardReviewState.model_validate(dict(row))

    async def count_cards(self) -> int:
        """Number of stored review records."""
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(select(func.count()).select_from(CardRecord))
                return result.scalar_one()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to count cards: {exc}") from exc
