"""API router aggregator."""

from fastapi import APIRouter

from storysky.api.routes.activity import router as activity_router
from storysky.api.routes.comments import router as comments_router
from storysky.api.routes.stories import router as stories_router
from storysky.api.routes.users import router as users_router

router = APIRouter(prefix="/api")
router.include_router(stories_router)
router.include_router(comments_router)
router.include_router(users_router)
router.include_router(activity_router)
