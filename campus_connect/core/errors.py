"""
Domain exceptions shared by services, routes and the chat hub.

Each carries a human-readable message (returned to the client as plain text) and
the HTTP status it maps to. main.py registers the single handler that renders
them.
"""

from fastapi import status


class CampusConnectError(Exception):
    """Base exception for the application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class AuthenticationError(CampusConnectError):
    """Bad credentials, or a missing, invalid or expired token."""

    status_code: int = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(AuthenticationError):
    """Token failed validation. expired=True only for well-formed tokens past their exp."""

    def __init__(
        self,
        message: str = "Invalid or expired token",
        expired: bool = False,
        cause: Exception | None = None,
    ) -> None:
        self.expired = expired
        super().__init__(message, cause)


class PermissionDeniedError(CampusConnectError):
    """Authenticated, but the identity lacks the required role."""

    status_code: int = status.HTTP_403_FORBIDDEN


class ValidationFailedError(CampusConnectError):
    """Missing field or business-rule violation."""

    status_code: int = status.HTTP_400_BAD_REQUEST


class NotFoundError(CampusConnectError):
    status_code: int = status.HTTP_404_NOT_FOUND


class PersistenceError(CampusConnectError):
    """The store was unreachable or a write did not commit."""

    status_code: int = status.HTTP_503_SERVICE_UNAVAILABLE
