"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import case, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel, UserFollowModel
from infrastructure.database.statements import insert_ignore


def _floored(column: Any, delta: int) -> Any:
    return case((column + delta < 0, 0), else_=column + delta)


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id).execution_options(
            populate_existing=True
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_external_id(self, external_id: str) -> Profile | None:
        """Get a profile by external identity."""
        stmt = select(ProfileModel).where(ProfileModel.external_id == external_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by username."""
        stmt = select(ProfileModel).where(ProfileModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, ids: list[UUID]) -> list[Profile]:
        """Get profiles by ID in a single query."""
        if not ids:
            return []
        stmt = select(ProfileModel).where(ProfileModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def search_public(self, query: str, limit: int) -> list[Profile]:
        """Search public profiles by username or display name, most followed first."""
        stmt = (
            select(ProfileModel)
            .where(
                ProfileModel.is_public.is_(True),
                or_(
                    ProfileModel.username.icontains(query, autoescape=True),
                    ProfileModel.display_name.icontains(query, autoescape=True),
                ),
            )
            .order_by(ProfileModel.follower_count.desc(), ProfileModel.username)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        written = await insert_ignore(
            self._session,
            ProfileModel,
            {
                "id": profile.id,
                "external_id": profile.external_id,
                "username": profile.username,
                "display_name": profile.display_name,
                "bio": profile.bio,
                "avatar_url": profile.avatar_url,
                "data": profile.data,
                "is_public": profile.is_public,
                "follower_count": profile.follower_count,
                "following_count": profile.following_count,
                "collections_seeded": profile.collections_seeded,
                "created_at": profile.created_at,
                "updated_at": profile.updated_at,
            },
        )
        if not written:
            raise ConflictError(
                "Profile",
                {"external_id": profile.external_id, "username": profile.username},
            )
        return profile

    async def update(self, profile: Profile) -> Profile:
        """Update editable profile fields."""
        model = await self._get_model(profile.id)

        model.username = profile.username
        model.display_name = profile.display_name
        model.bio = profile.bio
        model.avatar_url = profile.avatar_url
        model.is_public = profile.is_public
        model.updated_at = profile.updated_at

        try:
            await self._session.flush()
        except IntegrityError as exc:
            # Another profile claimed the username after the caller checked it
            raise ConflictError("Profile", {"username": profile.username}) from exc
        return self._to_entity(model)

    async def set_data(self, id: UUID, data: dict[str, Any]) -> None:
        """Replace the preference document."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(data=data, updated_at=datetime.utcnow())
        )
        await self._session.execute(stmt)

    async def claim_collection_seeding(self, id: UUID) -> bool:
        """Conditionally flip the seeding flag; only one caller ever wins."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id, ProfileModel.collections_seeded.is_(False))
            .values(collections_seeded=True)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def get_follow(self, follower_id: UUID, following_id: UUID) -> bool:
        """Check whether a follow edge exists."""
        stmt = select(UserFollowModel.id).where(
            UserFollowModel.follower_id == follower_id,
            UserFollowModel.following_id == following_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def add_follow(self, follower_id: UUID, following_id: UUID) -> None:
        """Insert a follow edge; counters move only when the edge is new."""
        written = await insert_ignore(
            self._session,
            UserFollowModel,
            {
                "id": uuid4(),
                "follower_id": follower_id,
                "following_id": following_id,
                "created_at": datetime.utcnow(),
            },
        )
        if written:
            await self._adjust_follow_counts(follower_id, following_id, 1)

    async def remove_follow(self, follower_id: UUID, following_id: UUID) -> bool:
        """Delete a follow edge."""
        stmt = delete(UserFollowModel).where(
            UserFollowModel.follower_id == follower_id,
            UserFollowModel.following_id == following_id,
        )
        result = await self._session.execute(stmt)
        if not result.rowcount:  # type: ignore[attr-defined]
            return False
        await self._adjust_follow_counts(follower_id, following_id, -1)
        return True

    async def _adjust_follow_counts(
        self, follower_id: UUID, following_id: UUID, delta: int
    ) -> None:
        await self._session.execute(
            update(ProfileModel)
            .where(ProfileModel.id == follower_id)
            .values(following_count=_floored(ProfileModel.following_count, delta))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            update(ProfileModel)
            .where(ProfileModel.id == following_id)
            .values(follower_count=_floored(ProfileModel.follower_count, delta))
            .execution_options(synchronize_session=False)
        )

    async def _get_model(self, id: UUID) -> ProfileModel:
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            raise ValueError(f"Profile {id} not found")
        return model

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            external_id=model.external_id,
            username=model.username,
            display_name=model.display_name,
            bio=model.bio,
            avatar_url=model.avatar_url,
            data=dict(model.data or {}),
            is_public=model.is_public,
            follower_count=model.follower_count,
            following_count=model.following_count,
            collections_seeded=model.collections_seeded,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
