"""Feedback record store backed by an async SQLAlchemy engine."""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from feedback_collector.models import Base, Feedback
from feedback_collector.query import FeedbackQuery
from feedback_collector.schemas import FeedbackCreate
from feedback_collector.utils.logging import debug_log

logger = logging.getLogger("FeedbackCollector.store")


class StoreError(Exception):
    """Raised when the underlying database fails."""


class StoreNotConnectedError(StoreError):
    """Raised when the store is used outside connect()/close()."""


def parse_record_id(raw: str) -> Optional[uuid.UUID]:
    """Parse a record id, returning None for anything that is not a UUID."""
    try:
        return uuid.UUID(str(raw))
    except (ValueError, AttributeError, TypeError):
        return None


class FeedbackStore:
    """
    Persistent collection of feedback records.

    The engine is created by connect() and disposed by close(); the
    application calls both around its own lifetime.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def connected(self) -> bool:
        return self._engine is not None

    async def connect(self, create_tables: bool = False) -> None:
        """Create the engine and, optionally, the schema."""
        if self._engine is not None:
            return
        self._engine = create_async_engine(self.database_url, echo=self.echo)
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)
        logger.info("Record store engine created")
        if create_tables:
            await self.create_schema()

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Record store engine disposed")

    async def create_schema(self) -> None:
        """Create all tables (idempotent)."""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not create schema: {e}") from e
        logger.info("Database schema is up to date")

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreNotConnectedError("Record store is not connected")
        return self._engine

    def session(self) -> AsyncSession:
        self._require_engine()
        return self._sessionmaker()

    # --- Operations ---

    async def add(self, data: FeedbackCreate) -> Feedback:
        """Persist one validated submission and return it with id and timestamps."""
        feedback = Feedback(
            name=data.name,
            email=data.email,
            message=data.message,
            rating=data.rating,
            category=data.category,
        )
        try:
            async with self.session() as session:
                session.add(feedback)
                await session.commit()
                await session.refresh(feedback)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not save feedback: {e}") from e
        debug_log("Stored feedback %s (%s)", feedback.id, feedback.category.value)
        return feedback

    async def get(self, record_id: str) -> Optional[Feedback]:
        parsed = parse_record_id(record_id)
        if parsed is None:
            return None
        try:
            async with self.session() as session:
                return await session.get(Feedback, parsed)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not load feedback {record_id}: {e}") from e

    async def delete(self, record_id: str) -> bool:
        """Remove a record permanently. Returns False when no such record exists."""
        parsed = parse_record_id(record_id)
        if parsed is None:
            return False
        try:
            async with self.session() as session:
                feedback = await session.get(Feedback, parsed)
                if feedback is None:
                    return False
                await session.delete(feedback)
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not delete feedback {record_id}: {e}") from e
        debug_log("Deleted feedback %s", record_id)
        return True

    async def find(self, query: FeedbackQuery) -> Tuple[List[Feedback], int]:
        """Return one page of matching records, newest first, and the total match count."""
        conditions = query.conditions()
        window = query.window

        stmt = (
            select(Feedback)
            .where(*conditions)
            .order_by(desc(Feedback.created_at))
            .offset(window.skip)
            .limit(window.limit)
        )
        count_stmt = select(func.count(Feedback.id)).where(*conditions)

        try:
            async with self.session() as session:
                result = await session.execute(stmt)
                records = list(result.scalars().all())
                total = (await session.execute(count_stmt)).scalar() or 0
        except SQLAlchemyError as e:
            raise StoreError(f"Could not query feedback: {e}") from e
        return records, total

    async def count(self) -> int:
        try:
            async with self.session() as session:
                return (await session.execute(select(func.count(Feedback.id)))).scalar() or 0
        except SQLAlchemyError as e:
            raise StoreError(f"Could not count feedback: {e}") from e
