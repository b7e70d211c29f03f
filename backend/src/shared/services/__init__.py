"""
Business Logic Services

Services encapsulate business logic and coordinate between repositories,
the cache and domain rules.

Service Pattern:
================
    Handler → Service → Repository → Database
                ↘ CacheService → Redis / memory

Services should:
- Contain business logic and validation
- Coordinate multiple repositories if needed
- Wrap multi-statement writes in SAVEPOINTs where they must be atomic
- NOT handle HTTP concerns (that's for handlers)

Available Services:
===================
- CacheService: Two-tier TTL cache with pattern invalidation
- ProjectQueryService / CommentQueryService: Bounded-statement listings
- NotificationService: Best-effort notification fan-out
- ProjectService: Publishing, detail pages, discover / feed / saved / search
- CommentService: Threaded comments and mentions
- SocialService: Likes, saves and follows
- CollectionService: Collections and their entries
- UserService: Profiles and mention suggestions

Usage:
======
    from src.shared.services import ProjectService

    service = ProjectService(db, cache)
    page = await service.discover_projects(viewer_id)
"""

from src.shared.services.cache_service import CacheService
from src.shared.services.collection_service import CollectionService
from src.shared.services.comment_query_service import CommentQueryService
from src.shared.services.comment_service import CommentService
from src.shared.services.notification_service import NotificationService
from src.shared.services.project_query_service import ProjectQueryService
from src.shared.services.project_service import ProjectService
from src.shared.services.social_service import SocialService
from src.shared.services.user_service import UserService

__all__ = [
    "CacheService",
    "CollectionService",
    "CommentQueryService",
    "CommentService",
    "NotificationService",
    "ProjectQueryService",
    "ProjectService",
    "SocialService",
    "UserService",
]
