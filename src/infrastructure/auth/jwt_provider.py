"""JWT verification provider.

Supports identity-provider-issued JWTs (RS256/ES256 via JWKS, e.g. a
Cognito user pool) and locally-created tokens (HS256 for development and
tests).

ID token payload structure:
    {
        "sub": "3f1c...",
        "email": "user@example.com",
        "iss": "https://cognito-idp.eu-west-1.amazonaws.com/eu-west-1_abc",
        "aud": "client-id",
        "token_use": "id",
        "exp": 1234567890
    }

Only signature, expiry, issuer and audience are checked here. Which claims
identify the caller is decided by ``domain.entities.identity``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
import structlog
from jose import jwk, jwt
from jose.exceptions import JOSEError

from core.config import settings

logger = structlog.get_logger()

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache the identity provider's JWKS keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.resolved_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
            # Build a kid -> key mapping
            _jwks_cache = {}
            for key_data in jwks_data.get("keys", []):
                kid = key_data.get("kid")
                if kid:
                    _jwks_cache[kid] = key_data
            logger.info("jwks_fetched", key_count=len(_jwks_cache))
            return _jwks_cache
    except Exception:
        logger.exception("jwks_fetch_failed", jwks_url=jwks_url)
        return {}


class JWTAuthProvider:
    """JWT-based token verification provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        issuer: str = settings.jwt_issuer,
        audience: str = settings.jwt_audience,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._issuer = issuer
        self._audience = audience

    async def verify_token(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify a JWT and return its claims.

        The signing algorithm in the token header picks the key:
        - RS256/ES256: public key from the JWKS document, matched by kid
        - anything else: the configured shared secret and algorithm

        Args:
            token: The JWT to verify

        Returns:
            Claims if valid, None if invalid, expired or issued elsewhere
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg in ASYMMETRIC_ALGORITHMS:
                return await self._verify_with_jwks(token, header)

            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                **self._decode_kwargs(),
            )
        except JOSEError:
            return None

    async def _verify_with_jwks(self, token: str, header: dict) -> Optional[dict[str, Any]]:
        """Verify an asymmetrically signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Unknown kid: the provider may have rotated keys
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("jwks_key_not_found", kid=kid)
                return None

        alg = header["alg"]
        public_key = jwk.construct(key_data, algorithm=alg)
        return jwt.decode(
            token,
            public_key,
            algorithms=[alg],
            **self._decode_kwargs(),
        )

    def _decode_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"options": {"verify_aud": bool(self._audience)}}
        if self._audience:
            kwargs["audience"] = self._audience
        if self._issuer:
            kwargs["issuer"] = self._issuer
        return kwargs

    def create_token(self, claims: dict[str, Any]) -> str:
        """
        Create an HS256 token carrying ``claims`` (local use and tests).

        Args:
            claims: Claims to embed; exp, iss and aud are filled in

        Returns:
            The generated JWT string
        """
        payload: dict[str, Any] = dict(claims)
        payload.setdefault(
            "exp", datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)
        )
        if self._issuer:
            payload.setdefault("iss", self._issuer)
        if self._audience:
            payload.setdefault("aud", self._audience)

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
