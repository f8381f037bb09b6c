"""SQLAlchemy implementation of CommunityPost repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError
from domain.entities.community_post import CommunityPost
from infrastructure.database.models import CommunityPostModel
from infrastructure.database.statements import insert_ignore


class SQLAlchemyCommunityPostRepository:
    """SQLAlchemy implementation of ICommunityPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_collection(
        self, profile_id: UUID, collection_id: UUID
    ) -> CommunityPost | None:
        """Get the post projected from a collection."""
        stmt = select(CommunityPostModel).where(
            CommunityPostModel.profile_id == profile_id,
            CommunityPostModel.collection_id == collection_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_public(self, limit: int, offset: int) -> list[CommunityPost]:
        """Get public posts, newest first."""
        stmt = (
            select(CommunityPostModel)
            .where(CommunityPostModel.is_public.is_(True))
            .order_by(CommunityPostModel.created_at.desc(), CommunityPostModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_public_for_profile(self, profile_id: UUID, limit: int) -> list[CommunityPost]:
        """Get one profile's public posts, newest first."""
        stmt = (
            select(CommunityPostModel)
            .where(
                CommunityPostModel.profile_id == profile_id,
                CommunityPostModel.is_public.is_(True),
            )
            .order_by(CommunityPostModel.created_at.desc(), CommunityPostModel.id)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, post: CommunityPost) -> CommunityPost:
        """Create a new post."""
        written = await insert_ignore(
            self._session,
            CommunityPostModel,
            {
                "id": post.id,
                "profile_id": post.profile_id,
                "collection_id": post.collection_id,
                "post_type": post.post_type,
                "title": post.title,
                "description": post.description,
                "is_public": post.is_public,
                "like_count": post.like_count,
                "comment_count": post.comment_count,
                "view_count": post.view_count,
                "share_count": post.share_count,
                "created_at": post.created_at,
                "updated_at": post.updated_at,
            },
        )
        if not written:
            raise ConflictError("CommunityPost", {"collection_id": str(post.collection_id)})
        return post

    async def update(self, post: CommunityPost) -> CommunityPost:
        """Update an existing post's text."""
        stmt = select(CommunityPostModel).where(CommunityPostModel.id == post.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"CommunityPost {post.id} not found")

        model.title = post.title
        model.description = post.description
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def delete_for_collection(self, profile_id: UUID, collection_id: UUID) -> bool:
        """Delete the post projected from a collection."""
        stmt = delete(CommunityPostModel).where(
            CommunityPostModel.profile_id == profile_id,
            CommunityPostModel.collection_id == collection_id,
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)  # type: ignore[attr-defined]

    def _to_entity(self, model: CommunityPostModel) -> CommunityPost:
        """Convert ORM model to domain entity."""
        return CommunityPost(
            id=model.id,
            profile_id=model.profile_id,
            collection_id=model.collection_id,  # type: ignore[arg-type]
            post_type=model.post_type,
            title=model.title,
            description=model.description or "",
            is_public=model.is_public,
            like_count=model.like_count,
            comment_count=model.comment_count,
            view_count=model.view_count,
            share_count=model.share_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
