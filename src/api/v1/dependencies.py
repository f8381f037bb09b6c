"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.collection_service import CollectionService
from domain.services.community_post_projector import CommunityPostProjector
from domain.services.profile_service import ProfileService
from domain.services.saved_item_service import SavedItemService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(
            async_session_factory,
            timeout=settings.store_timeout_seconds,
        )

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_community_post_projector() -> CommunityPostProjector:
    """Get community post projector instance."""
    return CommunityPostProjector(get_uow_factory())


@lru_cache
def get_saved_item_service() -> SavedItemService:
    """Get SavedItem service instance."""
    return SavedItemService(
        get_uow_factory(),
        projector=get_community_post_projector(),
    )


@lru_cache
def get_collection_service() -> CollectionService:
    """Get Collection service instance."""
    return CollectionService(
        get_uow_factory(),
        projector=get_community_post_projector(),
    )
