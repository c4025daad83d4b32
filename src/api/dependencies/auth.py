"""Authentication dependencies for FastAPI."""

from typing import Annotated, Any

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode, MissingIdentityClaimError
from domain.entities.identity import Identity, extract_identity
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider

logger = structlog.get_logger()

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_verified_claims(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> dict[str, Any]:
    """
    Dependency returning the claims of a verified bearer token.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    claims = await auth_provider.verify_token(credentials.credentials)

    if claims is None:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return claims


async def get_current_identity(
    claims: Annotated[dict[str, Any], Depends(get_verified_claims)],
) -> Identity:
    """
    Dependency to get the identity of the authenticated caller.

    Raises:
        MissingIdentityClaimError: If the verified token has no subject
    """
    try:
        return extract_identity(claims)
    except MissingIdentityClaimError as exc:
        # A verified token without a subject means the verifier is misconfigured
        logger.error(
            "missing_identity_claim",
            claim=exc.claim,
            claim_names=sorted(claims),
        )
        raise


# Type alias for convenience in route handlers
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
