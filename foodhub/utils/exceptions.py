"""Custom HTTP exception classes module.

Provides pre-configured HTTPException subclasses for common error patterns.
These simplify error raising across services and repositories by
eliminating the need to specify status codes at each call site.
All of them are rendered as ``{"success": false, "message": ...}`` by
the handlers in ``foodhub.utils.error_handlers``.

Usage:
    from foodhub.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Zone not found")
    raise DuplicateError("Zone with this name already exists")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found exception.

    Raised when a requested resource (zone, order, courier, etc.) does not exist.

    Args:
        detail: Error message (default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """Duplicate value exception, reported as 400 Bad Request.

    Raised when creating or updating a resource would violate a uniqueness
    rule (duplicate zone name, courier e-mail, customer phone, ...).

    Args:
        detail: Error message (default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden exception.

    Raised when the authenticated account lacks the required type or permission.

    Args:
        detail: Error message (default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized exception.

    Raised when authentication is missing, invalid, or expired
    (missing JWT, expired token, invalid credentials).

    Args:
        detail: Error message (default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request exception.

    Raised when the request data is invalid beyond what Pydantic validation catches
    (business rule failures, invalid state transitions).

    Args:
        detail: Error message (default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class LockedError(HTTPException):
    """423 Locked exception.

    Raised when an account is temporarily locked after repeated failed logins.

    Args:
        detail: Error message
    """

    def __init__(
        self,
        detail: str = "Account is temporarily locked due to multiple failed login attempts. Please try again later.",
    ) -> None:
        super().__init__(status_code=status.HTTP_423_LOCKED, detail=detail)
