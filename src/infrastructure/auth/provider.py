"""Authentication provider protocol."""

from typing import Any, Optional, Protocol


class IAuthProvider(Protocol):
    """Protocol for token verification providers."""

    async def verify_token(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify a bearer token.

        Args:
            token: The bearer token to verify

        Returns:
            The verified claims if the token is valid, None otherwise
        """
        ...

    def create_token(self, claims: dict[str, Any]) -> str:
        """
        Mint a token carrying ``claims``.

        Args:
            claims: Claims to embed; an expiry is added

        Returns:
            The generated token string
        """
        ...
