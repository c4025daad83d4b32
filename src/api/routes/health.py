"""Health check endpoints."""

from typing import Callable

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies.services import get_uow_factory
from core.config import settings
from core.exceptions import StoreUnavailableError
from domain.entities.profile import format_timestamp, utc_now
from domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    version: str
    store: str | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """
    Liveness probe for load balancers.

    Unauthenticated and dependency-free: answers whenever the process does.
    """
    return HealthResponse(
        status="healthy",
        timestamp=format_timestamp(utc_now()),
        version=settings.app_version,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> HealthResponse:
    """
    Health check including a round trip to the profile store.

    Store failures are reported as ``unhealthy`` without internal detail.
    """
    store_status = "healthy"
    try:
        async with uow_factory() as uow:
            await uow.profiles.ping()
    except StoreUnavailableError:
        store_status = "unhealthy"

    return HealthResponse(
        status="healthy" if store_status == "healthy" else "degraded",
        timestamp=format_timestamp(utc_now()),
        version=settings.app_version,
        store=store_status,
    )
