"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    MISSING_IDENTITY_CLAIM = "MISSING_IDENTITY_CLAIM"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class MissingIdentityClaimError(AuthenticationError):
    """A verified token lacks the claim that identifies the caller.

    Tokens reach the application only after signature verification, so this
    points at a misconfigured upstream verifier rather than a bad request.
    """

    def __init__(self, claim: str = "sub") -> None:
        super().__init__(
            message=f"Missing {claim} claim in token",
            error_code=ErrorCode.MISSING_IDENTITY_CLAIM,
        )
        self.claim = claim
        self.details = {"claim": claim}


class ProfileNotFoundError(AppException):
    """No profile stored for the caller."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="Profile not found",
            status_code=404,
        )


class InvalidPayloadError(AppException):
    """Request body is absent or is not a JSON object."""

    def __init__(self, message: str = "Invalid JSON in request body") -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_PAYLOAD,
            message=message,
            status_code=400,
        )


class ValidationFailedError(AppException):
    """Request body parsed but required fields are missing or mistyped."""

    def __init__(
        self,
        missing_fields: list[str] | None = None,
        invalid_fields: list[str] | None = None,
    ) -> None:
        self.missing_fields = list(missing_fields or [])
        self.invalid_fields = list(invalid_fields or [])

        parts = []
        if self.missing_fields:
            parts.append(f"{' and '.join(self.missing_fields)} required")
        if self.invalid_fields:
            parts.append(f"{', '.join(self.invalid_fields)} must be strings")

        super().__init__(
            error_code=ErrorCode.VALIDATION_FAILED,
            message="; ".join(parts) or "Validation failed",
            status_code=400,
            details={
                "missing_fields": self.missing_fields,
                "invalid_fields": self.invalid_fields,
            },
        )


class StoreUnavailableError(AppException):
    """The profile store could not complete an operation."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message="Internal server error",
            status_code=500,
        )
