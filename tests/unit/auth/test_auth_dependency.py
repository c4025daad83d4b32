"""Unit tests for authentication dependencies."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import get_current_identity, get_verified_claims
from core.exceptions import AuthenticationError, ErrorCode, MissingIdentityClaimError
from infrastructure.auth.jwt_provider import JWTAuthProvider


@pytest.fixture
def provider() -> JWTAuthProvider:
    return JWTAuthProvider(
        secret_key="test-secret", algorithm="HS256", expire_minutes=30, issuer="", audience=""
    )


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# --- get_verified_claims ---


class TestGetVerifiedClaims:
    @pytest.mark.asyncio
    async def test_returns_claims_with_valid_token(self, provider: JWTAuthProvider):
        token = provider.create_token({"sub": "u1", "email": "a@x.com"})

        claims = await get_verified_claims(_bearer(token), provider)

        assert claims["sub"] == "u1"
        assert claims["email"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_raises_when_no_credentials(self, provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_verified_claims(None, provider)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_raises_when_invalid_token(self, provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_verified_claims(_bearer("invalid.jwt.token"), provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_expired_token(self):
        expired = JWTAuthProvider(
            secret_key="test-secret", algorithm="HS256", expire_minutes=-1, issuer="", audience=""
        )
        token = expired.create_token({"sub": "u1"})
        normal = JWTAuthProvider(
            secret_key="test-secret", algorithm="HS256", expire_minutes=30, issuer="", audience=""
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await get_verified_claims(_bearer(token), normal)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_signed_with_other_secret(self, provider: JWTAuthProvider):
        other = JWTAuthProvider(
            secret_key="other-secret", algorithm="HS256", expire_minutes=30, issuer="", audience=""
        )
        token = other.create_token({"sub": "u1"})

        with pytest.raises(AuthenticationError):
            await get_verified_claims(_bearer(token), provider)


# --- get_current_identity ---


class TestGetCurrentIdentity:
    @pytest.mark.asyncio
    async def test_builds_identity_from_claims(self):
        identity = await get_current_identity({"sub": "u1", "email": "a@x.com"})

        assert identity.identity_id == "u1"
        assert identity.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_missing_email_is_tolerated(self):
        identity = await get_current_identity({"sub": "u1"})

        assert identity.email == ""

    @pytest.mark.asyncio
    async def test_missing_subject_raises(self):
        with pytest.raises(MissingIdentityClaimError) as exc_info:
            await get_current_identity({"email": "a@x.com"})

        assert exc_info.value.error_code == ErrorCode.MISSING_IDENTITY_CLAIM
