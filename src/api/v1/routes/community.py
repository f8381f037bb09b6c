"""Community feed API routes."""

import structlog
from fastapi import APIRouter, Depends, Query, Request

from api.v1.dependencies import get_community_post_projector
from api.v1.schemas.community import CommunityFeedResponse, FeedPostResponse
from core.exceptions import StoreUnavailableError
from core.rate_limit import READ_LIMIT, limiter
from domain.services.community_post_projector import CommunityPostProjector

logger = structlog.get_logger()

router = APIRouter(prefix="/community", tags=["community"])


@router.get(
    "/posts",
    response_model=CommunityFeedResponse,
    summary="List public community posts",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_posts(
    request: Request,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    projector: CommunityPostProjector = Depends(get_community_post_projector),
) -> CommunityFeedResponse:
    """Public posts, newest first, with author and collection preview.

    Returns an empty list while the store is unavailable.
    """
    try:
        posts = await projector.list_public_posts(limit=limit, offset=offset)
    except StoreUnavailableError:
        logger.warning("community_posts_read_failed_open")
        return CommunityFeedResponse(data=[])

    return CommunityFeedResponse(data=[FeedPostResponse.from_feed_post(p) for p in posts])
