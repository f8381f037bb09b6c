"""Profile service: identity resolution, profile editing and follows."""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import structlog

from core.exceptions import (
    ConflictError,
    ProfileNotFoundError,
    UsernameTakenError,
    ValidationError,
)
from domain.entities.profile import Profile, PublicProfile
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def resolve_profile_id(self, external_id: str) -> UUID:
        """Map an external identity to its internal profile ID, creating the profile on first use.

        Two concurrent first calls can both miss the lookup; the loser's insert
        conflicts on the external ID and it returns the winner's row instead.

        Raises:
            ValidationError: external_id is empty.
            StoreUnavailableError: any other store failure.
        """
        if not external_id or not external_id.strip():
            raise ValidationError("External identity is required", field="external_id")

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get_by_external_id(external_id)
            if existing:
                return existing.id

            candidate = Profile.for_external_id(external_id)
            try:
                created = await uow.profiles.create(candidate)
            except ConflictError:
                winner = await uow.profiles.get_by_external_id(external_id)
                if winner:
                    logger.info(
                        "profile_created_concurrently",
                        external_id=external_id,
                        profile_id=str(winner.id),
                    )
                    return winner.id
                # Conflict came from the derived username, not the identity
                candidate.username = f"{candidate.username}_{uuid4().hex[:6]}"
                created = await uow.profiles.create(candidate)

            await uow.commit()
            logger.info(
                "profile_created",
                external_id=external_id,
                profile_id=str(created.id),
            )
            return created.id

    async def get_profile(self, profile_id: UUID) -> Profile:
        """Get a profile by internal ID."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                raise ProfileNotFoundError(str(profile_id))
            return profile

    async def get_by_username(self, username: str) -> Profile:
        """Get a profile by username."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_username(username)
            if not profile:
                raise ProfileNotFoundError(username)
            return profile

    async def get_public_profile(self, username: str, post_limit: int = 20) -> PublicProfile:
        """Get a public profile with its public collections and posts.

        Private profiles are reported as not found.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_username(username)
            if not profile or not profile.is_public:
                raise ProfileNotFoundError(username)

            collections = await uow.collections.get_public_for_profile(profile.id)
            posts = await uow.posts.get_public_for_profile(profile.id, limit=post_limit)
            return PublicProfile(profile=profile, collections=collections, posts=posts)

    async def search_profiles(self, query: str, limit: int = 10) -> list[Profile]:
        """Public profiles whose username or display name contains the query.

        Most followed first. A blank query matches nobody.
        """
        query = query.strip()
        if not query:
            return []
        async with self._uow_factory() as uow:
            return await uow.profiles.search_public(query, limit=limit)  # type: ignore[no-any-return]

    async def update_profile(
        self,
        profile_id: UUID,
        username: str | None = None,
        display_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
        is_public: bool | None = None,
    ) -> Profile:
        """Patch the editable profile fields. Omitted fields keep their values."""
        if username is not None and not username.strip():
            raise ValidationError("Username cannot be empty", field="username")

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                raise ProfileNotFoundError(str(profile_id))

            if username is not None:
                username = username.strip()
                if username != profile.username:
                    taken = await uow.profiles.get_by_username(username)
                    if taken and taken.id != profile.id:
                        raise UsernameTakenError(username)
                    profile.username = username
            if display_name is not None:
                profile.display_name = display_name
            if bio is not None:
                profile.bio = bio
            if avatar_url is not None:
                profile.avatar_url = avatar_url
            if is_public is not None:
                profile.is_public = is_public
            profile.updated_at = datetime.utcnow()

            try:
                updated = await uow.profiles.update(profile)
            except ConflictError as exc:
                raise UsernameTakenError(profile.username) from exc
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def get_preferences(self, profile_id: UUID) -> dict[str, Any]:
        """Get the preference document, filled in with defaults."""
        profile = await self.get_profile(profile_id)
        return profile.preferences()

    async def set_preferences(self, profile_id: UUID, data: dict[str, Any]) -> dict[str, Any]:
        """Replace the stored preference document."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                raise ProfileNotFoundError(str(profile_id))
            await uow.profiles.set_data(profile_id, data)
            await uow.commit()
            profile.data = data
            return profile.preferences()

    async def follow(self, profile_id: UUID, target_username: str) -> Profile:
        """Follow another profile. Following twice is a no-op."""
        async with self._uow_factory() as uow:
            target = await uow.profiles.get_by_username(target_username)
            if not target:
                raise ProfileNotFoundError(target_username)
            if target.id == profile_id:
                raise ValidationError("You cannot follow yourself", field="username")

            if not await uow.profiles.get_follow(profile_id, target.id):
                await uow.profiles.add_follow(profile_id, target.id)
                await uow.commit()
                logger.info(
                    "profile_followed",
                    follower_id=str(profile_id),
                    following_id=str(target.id),
                )
            return await uow.profiles.get(target.id)  # type: ignore[no-any-return]

    async def unfollow(self, profile_id: UUID, target_username: str) -> Profile:
        """Stop following another profile. Unfollowing a stranger is a no-op."""
        async with self._uow_factory() as uow:
            target = await uow.profiles.get_by_username(target_username)
            if not target:
                raise ProfileNotFoundError(target_username)

            if await uow.profiles.remove_follow(profile_id, target.id):
                await uow.commit()
                logger.info(
                    "profile_unfollowed",
                    follower_id=str(profile_id),
                    following_id=str(target.id),
                )
            return await uow.profiles.get(target.id)  # type: ignore[no-any-return]
