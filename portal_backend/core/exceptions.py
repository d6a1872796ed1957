"""
Error taxonomy for the portal backend.

Services raise these; the application registers a single handler that
renders them as ``{"success": false, "message": ...}`` with the matching
HTTP status code.
"""

from fastapi import status


class PortalError(Exception):
    """Base exception for all portal errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(PortalError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "All fields are required"


class InvalidCredentials(PortalError):
    """Unknown identity or wrong secret. The two cases are never distinguished."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class Unauthenticated(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not logged in"


class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class DuplicateEmail(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already registered"


class DuplicateName(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "A competition with this name already exists"


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreUnavailable(PortalError):
    """Persistence failure. The message shown to clients is always generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
