"""Profile domain entity and its storage keys."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import NamedTuple

USER_PREFIX = "USER#"
EMAIL_PREFIX = "EMAIL#"
PROFILE_SORT_KEY = "PROFILE"


def utc_now() -> datetime:
    """Current UTC time, truncated to the millisecond precision the store keeps."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass
class Profile:
    """Domain entity for a user profile.

    One profile exists per identity. ``user_id`` and ``email`` always come
    from the verified token, never from the request body.
    """

    user_id: str
    email: str
    given_name: str
    family_name: str
    bio: str = ""
    avatar_url: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


class CompositeKey(NamedTuple):
    """Two-part record key: partition component plus sort component."""

    partition: str
    sort: str


def profile_key(user_id: str) -> CompositeKey:
    """Primary key of the profile owned by ``user_id``."""
    return CompositeKey(f"{USER_PREFIX}{user_id}", PROFILE_SORT_KEY)


def email_index_key(email: str, user_id: str) -> CompositeKey:
    """Secondary index key used to find profiles by email."""
    return CompositeKey(f"{EMAIL_PREFIX}{email}", f"{USER_PREFIX}{user_id}")


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix for UTC."""
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
