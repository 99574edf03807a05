"""Error taxonomy shared by every layer of the portal.

Each error carries the HTTP status the API layer answers with, so routers never
have to translate storage or token failures themselves.
"""

from __future__ import annotations

from typing import Optional


class PortalError(Exception):
    """Base class for every expected failure raised by the portal."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(PortalError):
    default_message = "Invalid configuration"


class ValidationError(PortalError):
    status_code = 400
    default_message = "Invalid request data"


class NotFoundError(PortalError):
    status_code = 404
    default_message = "Document not found"


class SessionNotFoundError(NotFoundError):
    status_code = 401
    default_message = "Session not found"


class ConflictError(PortalError):
    status_code = 409
    default_message = "Document with this ID already exists"


class StorageError(PortalError):
    default_message = "Failed to access storage"


class InvalidCredentialsError(PortalError):
    status_code = 401
    default_message = "Invalid email or password"


class InvalidTokenError(PortalError):
    status_code = 401
    default_message = "Invalid token"


class TokenExpiredError(PortalError):
    status_code = 401
    default_message = "Token expired"


class UnauthorizedError(PortalError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(PortalError):
    status_code = 403
    default_message = "Insufficient permissions"


class BackendNetworkError(PortalError):
    status_code = 502
    default_message = "Network error - unable to reach server"


class BackendTimeoutError(PortalError):
    status_code = 504
    default_message = "Request timeout"


class DeliveryError(PortalError):
    status_code = 500
    default_message = "Failed to send message. Please try again later."
