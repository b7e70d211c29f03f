"""
Cache Dependency

The CacheService is created once by the application lifespan and stored on
app.state; handlers receive that same instance.

Usage:
======
    from src.api.dependencies.cache import Cache

    @router.get("/discover")
    async def discover(cache: Cache):
        ...
"""

from typing import Annotated

from fastapi import Depends, Request

from src.shared.services.cache_service import CacheService


async def get_cache(request: Request) -> CacheService:
    """Return the application's CacheService."""
    return request.app.state.cache


Cache = Annotated[CacheService, Depends(get_cache)]
