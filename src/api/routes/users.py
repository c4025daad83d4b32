"""Profile API routes for the authenticated caller."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentIdentity
from api.dependencies.services import get_profile_service
from api.schemas.common import ErrorResponse
from api.schemas.profile import ProfileResponse, ProfileSavedResponse, ProfileUpsert
from core.exceptions import ProfileNotFoundError
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get my profile",
    responses={
        200: {"description": "Stored profile"},
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        404: {"model": ErrorResponse, "description": "No profile saved yet"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    identity: CurrentIdentity,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Return the caller's own profile. Only the caller's record is reachable."""
    profile = await service.get_profile(identity.identity_id)
    if profile is None:
        raise ProfileNotFoundError()
    return ProfileResponse.from_entity(profile)


@router.put(
    "/me",
    response_model=ProfileSavedResponse,
    summary="Create or replace my profile",
    responses={
        200: {"description": "Profile saved"},
        400: {"model": ErrorResponse, "description": "Malformed body or missing fields"},
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": ProfileUpsert.model_json_schema(by_alias=True),
                },
            },
        },
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def put_my_profile(
    request: Request,
    identity: CurrentIdentity,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileSavedResponse:
    """
    Create the caller's profile or replace it entirely.

    Every write is a full replace: bio and avatarUrl fall back to empty
    strings when omitted. userId and email come from the token.
    """
    body = await request.body()
    profile = await service.put_profile(identity.identity_id, identity.email, body)
    return ProfileSavedResponse(user_id=profile.user_id, email=profile.email)
