"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, user_id: str) -> Profile | None:
        """Get the profile stored under the user's primary key."""
        ...

    async def get_by_email(self, email: str) -> list[Profile]:
        """Get profiles through the email index."""
        ...

    async def put(self, profile: Profile) -> Profile:
        """Create or fully replace a profile in a single write."""
        ...

    async def ping(self) -> None:
        """Round-trip to the store without touching any record."""
        ...
