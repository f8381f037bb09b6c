"""Profile API routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from api.dependencies.auth import CurrentProfileId
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import (
    PreferencesResponse,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileData,
    PublicProfileResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService

# The caller's own profile
router = APIRouter(prefix="/profile", tags=["profile"])

# Other people's public profiles
profiles_router = APIRouter(prefix="/profiles", tags=["profile"])


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_own_profile(
    request: Request,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the caller's profile, creating it on first use."""
    profile = await service.get_profile(profile_id)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Update own profile",
    responses={
        200: {"description": "Profile updated"},
        409: {"description": "Username already taken"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_own_profile(
    request: Request,
    body: ProfileUpdate,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Patch the caller's profile. Fields absent from the body keep their values."""
    profile = await service.update_profile(
        profile_id,
        username=body.username,
        display_name=body.display_name,
        bio=body.bio,
        avatar_url=body.avatar_url,
        is_public=body.is_public,
    )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.get(
    "/preferences",
    response_model=PreferencesResponse,
    summary="Get style preferences",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_preferences(
    request: Request,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> PreferencesResponse:
    """Get the caller's preference document, with defaults for unset fields."""
    return PreferencesResponse(data=await service.get_preferences(profile_id))


@router.put(
    "/preferences",
    response_model=PreferencesResponse,
    summary="Replace style preferences",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def set_preferences(
    request: Request,
    profile_id: CurrentProfileId,
    body: dict[str, Any] = Body(...),
    service: ProfileService = Depends(get_profile_service),
) -> PreferencesResponse:
    """Replace the caller's preference document."""
    return PreferencesResponse(data=await service.set_preferences(profile_id, body))


@profiles_router.get(
    "",
    response_model=ProfileListResponse,
    summary="Search public profiles",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_profiles(
    request: Request,
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(10, ge=1, le=50),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """Public profiles whose username or display name contains ``q``, most followed first."""
    profiles = await service.search_profiles(q, limit=limit)
    return ProfileListResponse(data=[ProfileResponse.from_entity(p) for p in profiles])


@profiles_router.get(
    "/{username}",
    response_model=PublicProfileResponse,
    summary="Get a public profile",
    responses={
        200: {"description": "Profile found"},
        404: {"description": "Profile not found or private"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_public_profile(
    request: Request,
    username: str,
    service: ProfileService = Depends(get_profile_service),
) -> PublicProfileResponse:
    """Get a public profile with its public collections and latest posts."""
    view = await service.get_public_profile(username)
    return PublicProfileResponse(data=PublicProfileData.from_view(view))


@profiles_router.post(
    "/{username}/follow",
    response_model=ProfileDetailResponse,
    summary="Follow a profile",
    responses={
        200: {"description": "Following (idempotent)"},
        400: {"description": "Cannot follow yourself"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def follow_profile(
    request: Request,
    username: str,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Follow another profile and return it with updated counters."""
    target = await service.follow(profile_id, username)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(target))


@profiles_router.delete(
    "/{username}/follow",
    response_model=ProfileDetailResponse,
    summary="Unfollow a profile",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def unfollow_profile(
    request: Request,
    username: str,
    profile_id: CurrentProfileId,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Stop following another profile and return it with updated counters."""
    target = await service.unfollow(profile_id, username)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(target))
