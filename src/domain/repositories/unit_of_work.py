"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.collection_repository import ICollectionRepository
from domain.repositories.community_post_repository import ICommunityPostRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.saved_item_repository import ISavedItemRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    saved_items: ISavedItemRepository
    collections: ICollectionRepository
    posts: ICommunityPostRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
