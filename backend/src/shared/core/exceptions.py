"""
Custom Exceptions

Application-specific exceptions carrying an HTTP status and an error code.

Exception Hierarchy:
====================
    FolioException (base, 500)
       │
       ├── AuthenticationError (401)     ← Missing or invalid identity token
       ├── AuthorizationError (403)      ← Authenticated but not the owner
       ├── NotFoundError (404)
       │      ├── UserNotFoundError
       │      ├── ProjectNotFoundError
       │      ├── CommentNotFoundError
       │      └── CollectionNotFoundError
       ├── ValidationError (400)         ← Missing or malformed input
       └── ConflictError (409)           ← Unique constraint hit

Best-effort work (notifications, cache writes) never raises these: it logs
and degrades instead. Everything else propagates to the error handler
middleware, which renders:

    {
        "error": {
            "code": "CONFLICT",
            "message": "Project already liked",
            "details": {}
        }
    }
"""

from typing import Any, Optional


class FolioException(Exception):
    """
    Base exception for all Folio application errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (default 500)
        error_code: Machine-readable error code
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the JSON error body."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# ═══════════════════════════════════════════════════════════════════════════════
# AUTHENTICATION & AUTHORIZATION ERRORS (401, 403)
# ═══════════════════════════════════════════════════════════════════════════════


class AuthenticationError(FolioException):
    """
    Authentication failed error (401 Unauthorized).

    Raised when the bearer token is missing, expired or malformed.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class AuthorizationError(FolioException):
    """
    Authorization failed error (403 Forbidden).

    Raised when the caller is known but does not own the resource.
    """

    def __init__(
        self,
        message: str = "Forbidden",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# NOT FOUND ERRORS (404)
# ═══════════════════════════════════════════════════════════════════════════════


class NotFoundError(FolioException):
    """
    Resource not found error (404 Not Found).

    Example:
        raise NotFoundError("Like")
        # Message: "Like not found"
    """

    def __init__(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


class UserNotFoundError(NotFoundError):
    """User not found error."""

    def __init__(self, user_id: str) -> None:
        super().__init__(resource="User", resource_id=user_id)


class ProjectNotFoundError(NotFoundError):
    """Project not found error."""

    def __init__(self, project_id: str) -> None:
        super().__init__(resource="Project", resource_id=project_id)


class CommentNotFoundError(NotFoundError):
    """Comment not found error."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(resource="Comment", resource_id=comment_id)


class CollectionNotFoundError(NotFoundError):
    """Collection not found error."""

    def __init__(self, collection_id: str) -> None:
        super().__init__(resource="Collection", resource_id=collection_id)


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATION & CONFLICT ERRORS (400, 409)
# ═══════════════════════════════════════════════════════════════════════════════


class ValidationError(FolioException):
    """Validation error (400 Bad Request)."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(FolioException):
    """
    Resource conflict error (409 Conflict).

    Raised when a unique constraint rejects the write, with a message
    naming what already exists.

    Example:
        raise ConflictError("Already following this user")
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details,
        )
