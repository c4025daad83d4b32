"""Profile service layer with business logic."""

from collections.abc import Mapping
from typing import Any, Callable, List, Optional

import orjson
import structlog

from core.exceptions import InvalidPayloadError, ValidationFailedError
from domain.entities.profile import Profile, utc_now
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

REQUIRED_FIELDS = ("givenName", "familyName")
OPTIONAL_FIELDS = ("bio", "avatarUrl")

Payload = bytes | str | Mapping[str, Any] | None


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_profile(self, identity_id: str) -> Optional[Profile]:
        """Get the caller's own profile, or None if they have not saved one."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get(identity_id)

    async def put_profile(self, identity_id: str, email: str, payload: Payload) -> Profile:
        """
        Create or fully replace the caller's profile.

        Optional fields omitted from the payload are reset to empty strings.
        The creation timestamp of an existing profile is carried over.

        Raises:
            InvalidPayloadError: If the payload is empty or not a JSON object
            ValidationFailedError: If required fields are missing or mistyped
        """
        fields = self._validate(self._parse(payload))

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(identity_id)
            now = utc_now()

            profile = Profile(
                user_id=identity_id,
                email=email,
                given_name=fields["givenName"],
                family_name=fields["familyName"],
                bio=fields["bio"],
                avatar_url=fields["avatarUrl"],
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )

            saved = await uow.profiles.put(profile)
            await uow.commit()

        logger.info(
            "profile_updated" if existing else "profile_created",
            user_id=identity_id,
        )
        return saved

    async def find_by_email(self, email: str) -> List[Profile]:
        """Look profiles up through the email index."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_by_email(email)

    @staticmethod
    def _parse(payload: Payload) -> Mapping[str, Any]:
        if payload is None or payload == b"" or payload == "":
            raise InvalidPayloadError("Request body is required")

        if isinstance(payload, Mapping):
            return payload

        try:
            parsed = orjson.loads(payload)
        except orjson.JSONDecodeError:
            raise InvalidPayloadError() from None

        if not isinstance(parsed, dict):
            raise InvalidPayloadError("Request body must be a JSON object")
        return parsed

    @staticmethod
    def _validate(data: Mapping[str, Any]) -> dict[str, str]:
        missing: list[str] = []
        invalid: list[str] = []
        fields: dict[str, str] = {}

        for name in REQUIRED_FIELDS:
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
            elif not isinstance(value, str):
                invalid.append(name)
            else:
                fields[name] = value

        for name in OPTIONAL_FIELDS:
            value = data.get(name)
            if value is None:
                fields[name] = ""
            elif not isinstance(value, str):
                invalid.append(name)
            else:
                fields[name] = value

        if missing or invalid:
            raise ValidationFailedError(missing_fields=missing, invalid_fields=invalid)
        return fields
