"""
Authentication Dependencies

FastAPI dependencies resolving the caller from a bearer JWT issued by the
external identity provider.

Dependency Hierarchy:
=====================
    get_current_user_token()  ← Extract and validate JWT from header
           │
           ▼
    get_current_user()        ← Require a user id claim (401 otherwise)

    get_optional_user()       ← Same, but anonymous callers get None

Type Aliases:
=============
    CurrentUser   - Authenticated user, {"user_id": ...}
    OptionalUser  - Authenticated user or None (public endpoints)

Usage:
======
    from src.api.dependencies.auth import CurrentUser, OptionalUser

    @router.get("/feed")
    async def feed(current_user: CurrentUser):
        viewer_id = current_user["user_id"]

    @router.get("/discover")
    async def discover(viewer: OptionalUser):
        viewer_id = viewer["user_id"] if viewer else None
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config.settings import settings
from src.shared.core.exceptions import AuthenticationError
from src.shared.utils.security import SecurityUtils


# Missing credentials are reported by get_current_user as 401, not by FastAPI
security = HTTPBearer(auto_error=False)


def _user_from_token(token: str) -> dict:
    try:
        payload = SecurityUtils.decode_access_token(
            token, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM
        )
    except ValueError as e:
        raise AuthenticationError(str(e)) from e

    user_id = SecurityUtils.subject(payload)
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    return {"user_id": user_id}


async def get_current_user_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> str:
    """
    Extract the bearer token from the Authorization header.

    Raises:
        AuthenticationError: If the header is missing
    """
    if not credentials:
        raise AuthenticationError("Authorization header required")
    return credentials.credentials


async def get_current_user(
    token: Annotated[str, Depends(get_current_user_token)],
) -> dict:
    """
    Get the authenticated caller.

    Raises:
        AuthenticationError: If the token is invalid or carries no user id
    """
    return _user_from_token(token)


async def get_optional_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> Optional[dict]:
    """
    Get the caller if a token was sent.

    A present but invalid token is still rejected with 401.
    """
    if not credentials:
        return None
    return _user_from_token(credentials.credentials)


# ═══════════════════════════════════════════════════════════════════════════════
# TYPE ALIASES
# ═══════════════════════════════════════════════════════════════════════════════

CurrentUser = Annotated[dict, Depends(get_current_user)]
OptionalUser = Annotated[Optional[dict], Depends(get_optional_user)]
