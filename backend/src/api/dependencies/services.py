"""
Service Dependencies

FastAPI dependencies for service injection.

These dependencies create service instances with proper database session injection.
Services are created per-request, which is fine because:
- Services only hold the db session and the shared CacheService
- Each request gets its own db session
- The cache is the one instance owned by the application lifespan

Usage:
======
    from src.api.dependencies.services import get_project_service

    @router.get("/discover")
    async def discover(
        project_service: ProjectService = Depends(get_project_service)
    ):
        return await project_service.discover_projects()
"""

from src.api.dependencies.cache import Cache
from src.api.dependencies.database import DbSession
from src.shared.services.collection_service import CollectionService
from src.shared.services.comment_service import CommentService
from src.shared.services.notification_service import NotificationService
from src.shared.services.project_service import ProjectService
from src.shared.services.social_service import SocialService
from src.shared.services.user_service import UserService


async def get_project_service(
    db: DbSession,
    cache: Cache,
) -> ProjectService:
    """
    Dependency to get ProjectService instance.

    Creates a new service instance per request with the request's db session.
    """
    return ProjectService(db, cache)


async def get_social_service(
    db: DbSession,
    cache: Cache,
) -> SocialService:
    return SocialService(db, cache)


async def get_comment_service(
    db: DbSession,
    cache: Cache,
) -> CommentService:
    return CommentService(db, cache)


async def get_collection_service(
    db: DbSession,
) -> CollectionService:
    return CollectionService(db)


async def get_notification_service(
    db: DbSession,
) -> NotificationService:
    return NotificationService(db)


async def get_user_service(
    db: DbSession,
    cache: Cache,
) -> UserService:
    return UserService(db, cache)
