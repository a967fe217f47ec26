"""Custom exception hierarchy for the estatesite API."""
from typing import Optional


class SiteError(Exception):
    """Base exception for all estatesite errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SiteError):
    """Raised when required input is missing or malformed."""

    status_code = 400

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field


class NotFoundError(SiteError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class AlreadyInStateError(SiteError):
    """Raised when a state transition is requested for a record already in that state."""

    status_code = 400


class CapacityExceededError(SiteError):
    """Raised when a fixed-capacity slot set is full."""

    status_code = 400


class ConflictError(SiteError):
    """Raised when a write would duplicate a unique value."""

    status_code = 400


class AuthenticationError(SiteError):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = 401


class PermissionDeniedError(SiteError):
    """Raised when an authenticated admin lacks the required role or state."""

    status_code = 403
