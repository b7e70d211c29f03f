"""
API Dependencies

FastAPI dependencies for injection into route handlers.

Dependencies:
=============
- Database: get_db(), DbSession
- Authentication: get_current_user(), CurrentUser, OptionalUser
- Cache: get_cache(), Cache
- Pagination: get_pagination(), Pagination
- Services: get_*_service() functions

Type Aliases:
=============
Type aliases provide cleaner route signatures:

    # Instead of this:
    async def handler(
        db: AsyncSession = Depends(get_db),
        user: dict = Depends(get_current_user)
    ):

    # Write this:
    async def handler(db: DbSession, user: CurrentUser):

Usage:
======
    from src.api.dependencies import CurrentUser, Pagination

    @router.get("/saved")
    async def saved(current_user: CurrentUser, pagination: Pagination):
        ...
"""

from src.api.dependencies.database import (
    get_db,
    DbSession,
)
from src.api.dependencies.auth import (
    get_current_user,
    get_current_user_token,
    get_optional_user,
    CurrentUser,
    OptionalUser,
)
from src.api.dependencies.cache import (
    get_cache,
    Cache,
)
from src.api.dependencies.pagination import (
    get_pagination,
    Pagination,
)

__all__ = [
    # Database
    "get_db",
    "DbSession",
    # Authentication
    "get_current_user",
    "get_current_user_token",
    "get_optional_user",
    "CurrentUser",
    "OptionalUser",
    # Cache
    "get_cache",
    "Cache",
    # Pagination
    "get_pagination",
    "Pagination",
]
