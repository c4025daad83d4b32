"""Caller identity derived from verified token claims."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from core.exceptions import MissingIdentityClaimError

SUBJECT_CLAIM = "sub"
EMAIL_CLAIM = "email"


@dataclass(frozen=True)
class Identity:
    """Who is calling, as asserted by the identity provider."""

    identity_id: str
    email: str = ""


def extract_identity(claims: Mapping[str, Any]) -> Identity:
    """
    Build an Identity from an already-verified claims map.

    Args:
        claims: Claim name to value, as produced by token verification

    Returns:
        Identity with the subject as identity_id. A missing email claim
        becomes an empty string.

    Raises:
        MissingIdentityClaimError: If the subject claim is absent or blank
    """
    subject = claims.get(SUBJECT_CLAIM)
    if not isinstance(subject, str) or not subject.strip():
        raise MissingIdentityClaimError(SUBJECT_CLAIM)

    email = claims.get(EMAIL_CLAIM)
    return Identity(
        identity_id=subject,
        email=str(email) if email is not None else "",
    )
