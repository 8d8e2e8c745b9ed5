"""Mount all API routes."""

from fastapi import APIRouter

from elderease.api.collections import router as collections_router
from elderease.api.notifications import router as notifications_router
from elderease.api.tasks import router as tasks_router
from elderease.api.uploads import router as uploads_router
from elderease.api.users import router as users_router

api_router = APIRouter()
api_router.include_router(tasks_router, tags=["tasks"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(notifications_router, tags=["notifications"])
api_router.include_router(uploads_router, tags=["uploads"])
# Fallback last: /{collection} would otherwise shadow the routes above
api_router.include_router(collections_router, tags=["collections"])
