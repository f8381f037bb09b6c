"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    COLLECTION_NOT_FOUND = "COLLECTION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    CONFLICT = "CONFLICT"
    USERNAME_TAKEN = "USERNAME_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
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


class ValidationError(AppException):
    """Input rejected before touching the store."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {identifier}",
            status_code=404,
            details={"profile": identifier},
        )


class CollectionNotFoundError(AppException):
    """Collection does not exist or is not owned by the caller."""

    def __init__(self, collection_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COLLECTION_NOT_FOUND,
            message=f"Collection not found: {collection_id}",
            status_code=404,
            details={"collection_id": collection_id},
        )


class ConflictError(AppException):
    """Unique constraint violated on insert.

    Repositories raise this; services recover from it locally.
    """

    def __init__(self, entity: str, key: dict[str, Any] | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.CONFLICT,
            message=f"{entity} already exists",
            status_code=409,
            details={"entity": entity, **(key or {})},
        )


class UsernameTakenError(AppException):
    """Username is already used by another profile."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_TAKEN,
            message=f"Username already taken: {username}",
            status_code=409,
            details={"username": username},
        )


class StoreUnavailableError(AppException):
    """The relational store could not be reached or failed unexpectedly."""

    def __init__(self, reason: str = "Store unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=reason,
            status_code=503,
            details={"retryable": True},
        )
