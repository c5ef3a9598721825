"""Custom service layer errors."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    PERSISTENCE_ERROR = "persistence_error"
    PERMISSION_DENIED = "permission_denied"


class RentalFailure(str, Enum):
    """Reason codes for a rejected rental operation."""

    INVALID_DURATION = "invalid_duration"
    RENTAL_LIMIT_REACHED = "rental_limit_reached"
    INVALID_ITEM_COUNT = "invalid_item_count"
    INVALID_DATE = "invalid_date"
    ITEM_UNAVAILABLE = "item_unavailable"
    ITEM_OVERLAP = "item_overlap"
    INVALID_PRICE = "invalid_price"


class ServiceError(Exception):
    """Base error for service-layer failures."""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED


class ValidationError(ServiceError):
    """Raised when a business rule validation fails."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, reason: Optional[RentalFailure] = None) -> None:
        super().__init__(message)
        self.reason = reason


class NotFoundError(ServiceError):
    """Raised when an entity is not found."""

    kind = ErrorKind.NOT_FOUND


class PersistenceError(ServiceError):
    """Raised when the store rejects or cannot complete a write."""

    kind = ErrorKind.PERSISTENCE_ERROR


class AuthenticationError(ServiceError):
    """Raised when credentials are rejected."""

    kind = ErrorKind.VALIDATION_FAILED


class PermissionDeniedError(ServiceError):
    """Raised when the session role does not allow an operation."""

    kind = ErrorKind.PERMISSION_DENIED
