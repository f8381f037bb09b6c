"""Saved Items API routes."""

import structlog
from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentProfileId, CurrentUser
from api.v1.dependencies import get_profile_service, get_saved_item_service
from api.v1.schemas.saved_item import (
    ProductPayload,
    SavedItemListResponse,
    SavedItemResponse,
    SavedItemsReplace,
    SavedItemStatus,
    SavedItemStatusResponse,
)
from core.exceptions import StoreUnavailableError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService
from domain.services.saved_item_service import SavedItemService

logger = structlog.get_logger()

router = APIRouter(prefix="/saved-items", tags=["saved-items"])


@router.get(
    "",
    response_model=SavedItemListResponse,
    summary="List saved items",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_saved_items(
    request: Request,
    user: CurrentUser,
    profiles: ProfileService = Depends(get_profile_service),
    service: SavedItemService = Depends(get_saved_item_service),
) -> SavedItemListResponse:
    """Get the caller's saved items, newest first.

    Returns an empty list while the store is unavailable.
    """
    try:
        profile_id = await profiles.resolve_profile_id(user.external_id)
        items = await service.list_saved_items(profile_id)
    except StoreUnavailableError:
        logger.warning("saved_items_read_failed_open")
        return SavedItemListResponse(data=[])

    return SavedItemListResponse(data=[SavedItemResponse.from_entity(item) for item in items])


@router.post(
    "",
    response_model=SavedItemStatusResponse,
    summary="Save a product",
    responses={
        200: {"description": "Product saved (or was already saved)"},
        400: {"description": "Product id missing"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_saved_item(
    request: Request,
    body: ProductPayload,
    profile_id: CurrentProfileId,
    service: SavedItemService = Depends(get_saved_item_service),
) -> SavedItemStatusResponse:
    """Save a product snapshot. Saving the same product again is a no-op."""
    product = body.to_product()
    created = await service.add_saved_item(profile_id, product)
    return SavedItemStatusResponse(
        data=SavedItemStatus(product_id=str(product.get("id")), saved=True, changed=created)
    )


@router.put(
    "",
    response_model=SavedItemListResponse,
    summary="Replace all saved items",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def replace_saved_items(
    request: Request,
    body: SavedItemsReplace,
    profile_id: CurrentProfileId,
    service: SavedItemService = Depends(get_saved_item_service),
) -> SavedItemListResponse:
    """Replace the caller's saved set.

    Products that are no longer saved drop out of the caller's collections.
    """
    items = await service.replace_all_saved_items(
        profile_id, [payload.to_product() for payload in body.items]
    )
    return SavedItemListResponse(data=[SavedItemResponse.from_entity(item) for item in items])


@router.delete(
    "/{product_id:path}",
    response_model=SavedItemStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Unsave a product",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_saved_item(
    request: Request,
    product_id: str,
    profile_id: CurrentProfileId,
    service: SavedItemService = Depends(get_saved_item_service),
) -> SavedItemStatusResponse:
    """Unsave a product and remove it from every collection it was in."""
    removed = await service.remove_saved_item(profile_id, product_id)
    return SavedItemStatusResponse(
        data=SavedItemStatus(product_id=product_id.strip(), saved=False, changed=removed)
    )
