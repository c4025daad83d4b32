"""Pydantic schemas for Profile API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from domain.entities.profile import Profile, format_timestamp


class CamelModel(BaseModel):
    """Base schema rendering field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileUpsert(CamelModel):
    """Request body for PUT /users/me.

    Documentation only: the handler passes the raw body to the service so
    malformed JSON and missing fields map to the API's own 400 errors.
    """

    given_name: str = Field(..., min_length=1, examples=["Jane"])
    family_name: str = Field(..., min_length=1, examples=["Doe"])
    bio: str = Field("", examples=["Backend developer"])
    avatar_url: str = Field("", examples=["https://example.com/jane.png"])


class ProfileResponse(CamelModel):
    """Stored profile as returned to its owner. Storage keys are never included."""

    user_id: str
    email: str
    given_name: str
    family_name: str
    bio: str
    avatar_url: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            user_id=profile.user_id,
            email=profile.email,
            given_name=profile.given_name,
            family_name=profile.family_name,
            bio=profile.bio,
            avatar_url=profile.avatar_url,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class ProfileSavedResponse(CamelModel):
    """Acknowledgement of a profile write."""

    message: str = "Profile saved"
    user_id: str
    email: str
