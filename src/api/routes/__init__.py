"""API router configuration."""

from fastapi import APIRouter

from api.routes.health import router as health_router
from api.routes.users import router as users_router

router = APIRouter()
router.include_router(health_router)
router.include_router(users_router)
