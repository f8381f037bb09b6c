"""SQLAlchemy Unit of Work implementation."""

import asyncio
from typing import Any, Optional

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import ConflictError, StoreUnavailableError
from infrastructure.database.repositories.sqlalchemy_collection_repo import (
    SQLAlchemyCollectionRepository,
)
from infrastructure.database.repositories.sqlalchemy_community_post_repo import (
    SQLAlchemyCommunityPostRepository,
)
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository
from infrastructure.database.repositories.sqlalchemy_saved_item_repo import (
    SQLAlchemySavedItemRepository,
)

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    The whole block runs under a single deadline. Timeouts and driver failures
    surface as StoreUnavailableError; a unique violation that escaped the
    repositories surfaces as ConflictError.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: Optional[float] = None,
    ) -> None:
        self._session_factory = session_factory
        self._timeout = timeout
        self._session: Optional[AsyncSession] = None
        self._deadline: Optional[asyncio.Timeout] = None

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemyProfileRepository(self._session)

    @property
    def saved_items(self) -> SQLAlchemySavedItemRepository:
        """Get saved item repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemySavedItemRepository(self._session)

    @property
    def collections(self) -> SQLAlchemyCollectionRepository:
        """Get collection repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemyCollectionRepository(self._session)

    @property
    def posts(self) -> SQLAlchemyCommunityPostRepository:
        """Get community post repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemyCommunityPostRepository(self._session)

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        if self._timeout:
            self._deadline = asyncio.timeout(self._timeout)
            await self._deadline.__aenter__()
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        timed_out = False
        if self._deadline is not None:
            deadline, self._deadline = self._deadline, None
            try:
                await deadline.__aexit__(exc_type, exc_val, exc_tb)
            except TimeoutError:
                timed_out = True

        if self._session:
            try:
                if exc_type:
                    await self.rollback()
            finally:
                await self._session.close()
                self._session = None

        if timed_out:
            logger.warning("store_timeout", timeout_seconds=self._timeout)
            raise StoreUnavailableError("Store operation timed out") from exc_val
        if isinstance(exc_val, IntegrityError):
            raise ConflictError("Record") from exc_val
        if isinstance(exc_val, (SQLAlchemyError, OSError)):
            logger.error("store_error", error=str(exc_val), exc_info=exc_val)
            raise StoreUnavailableError() from exc_val
