"""Collection API routes."""

from uuid import UUID

import structlog
from fastapi import APIRouter, Body, Depends, Request, status

from api.dependencies.auth import CurrentProfileId, CurrentUser, OptionalProfileId
from api.v1.dependencies import get_collection_service, get_profile_service
from api.v1.schemas.collection import (
    AddItemAction,
    CollectionAction,
    CollectionDetailData,
    CollectionDetailResponse,
    CollectionListResponse,
    CollectionResponse,
    CollectionUpdate,
    CollectionWithItemsResponse,
    CreateCollectionAction,
)
from core.exceptions import CollectionNotFoundError, StoreUnavailableError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.collection_service import CollectionService
from domain.services.profile_service import ProfileService

logger = structlog.get_logger()

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get(
    "",
    response_model=CollectionListResponse,
    summary="List collections",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_collections(
    request: Request,
    user: CurrentUser,
    profiles: ProfileService = Depends(get_profile_service),
    service: CollectionService = Depends(get_collection_service),
) -> CollectionListResponse:
    """Get the caller's collections in creation order.

    The first call for a new profile creates the default collections.
    Returns an empty list while the store is unavailable.
    """
    try:
        profile_id = await profiles.resolve_profile_id(user.external_id)
        collections = await service.list_collections(profile_id)
    except StoreUnavailableError:
        logger.warning("collections_read_failed_open")
        return CollectionListResponse(data=[])

    return CollectionListResponse(data=[CollectionResponse.from_entity(c) for c in collections])


@router.post(
    "",
    response_model=CollectionDetailResponse,
    summary="Create a collection or change its membership",
    responses={
        200: {"description": "Action applied"},
        400: {"description": "Empty name or item id"},
        404: {"description": "Collection not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def collection_action(
    request: Request,
    profile_id: CurrentProfileId,
    body: CollectionAction = Body(...),
    service: CollectionService = Depends(get_collection_service),
) -> CollectionDetailResponse:
    """Apply one of the ``create``, ``addItem`` or ``removeItem`` actions."""
    if isinstance(body, CreateCollectionAction):
        fields = body.collection
        collection = await service.create_collection(
            profile_id,
            name=fields.name,
            color=fields.color,
            description=fields.description,
            custom_banner_url=fields.custom_banner,
            is_public=fields.is_public,
            item_ids=fields.item_ids,
        )
    elif isinstance(body, AddItemAction):
        collection = await service.add_item_to_collection(
            profile_id, body.item_id, body.collection_id
        )
    else:
        collection = await service.remove_item_from_collection(
            profile_id, body.item_id, body.collection_id
        )

    return CollectionDetailResponse(data=CollectionResponse.from_entity(collection))


@router.get(
    "/{collection_id}",
    response_model=CollectionWithItemsResponse,
    summary="Get a collection with its items",
    responses={
        200: {"description": "Collection found"},
        404: {"description": "Collection not found or not visible"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_collection(
    request: Request,
    collection_id: UUID,
    profile_id: OptionalProfileId,
    service: CollectionService = Depends(get_collection_service),
) -> CollectionWithItemsResponse:
    """Owners see any of their collections; everyone else sees public ones only."""
    if profile_id is None:
        detail = await service.get_public_collection(collection_id)
    else:
        detail = await service.get_collection(profile_id, collection_id)
    return CollectionWithItemsResponse(data=CollectionDetailData.from_detail(detail))


@router.patch(
    "/{collection_id}",
    response_model=CollectionDetailResponse,
    summary="Update a collection",
    responses={
        200: {"description": "Collection updated"},
        404: {"description": "Collection not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_collection(
    request: Request,
    collection_id: UUID,
    body: CollectionUpdate,
    profile_id: CurrentProfileId,
    service: CollectionService = Depends(get_collection_service),
) -> CollectionDetailResponse:
    """Patch a collection. Fields absent from the body keep their values."""
    sent = body.model_dump(exclude_unset=True)
    collection = await service.update_collection(
        profile_id,
        collection_id,
        name=sent.get("name"),
        color=sent.get("color"),
        description=sent.get("description", ...),
        custom_banner_url=sent.get("custom_banner", ...),
        is_public=sent.get("is_public"),
    )
    return CollectionDetailResponse(data=CollectionResponse.from_entity(collection))


@router.delete(
    "/{collection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a collection",
    responses={
        204: {"description": "Collection deleted"},
        404: {"description": "Collection not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_collection(
    request: Request,
    collection_id: UUID,
    profile_id: CurrentProfileId,
    service: CollectionService = Depends(get_collection_service),
) -> None:
    """Delete a collection and retract its community post."""
    if not await service.delete_collection(profile_id, collection_id):
        raise CollectionNotFoundError(str(collection_id))
    return None
