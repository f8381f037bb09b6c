"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.collections import router as collections_router
from api.v1.routes.community import router as community_router
from api.v1.routes.profiles import profiles_router
from api.v1.routes.profiles import router as profile_router
from api.v1.routes.saved_items import router as saved_items_router

router = APIRouter()
router.include_router(saved_items_router)
router.include_router(collections_router)
router.include_router(community_router)
router.include_router(profile_router)
router.include_router(profiles_router)
