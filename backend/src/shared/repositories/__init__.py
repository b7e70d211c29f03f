"""
Repository Pattern Implementations

Repositories encapsulate database queries behind a small async API.

Repository Hierarchy:
=====================
    BaseRepository[ModelType]           ← Generic CRUD operations
         │
         ├── UserRepository             ← Profiles, search, mention lookup
         ├── ProjectRepository          ← Feed rows, counts, counters
         ├── CommentRepository          ← Threaded comment rows
         ├── LikeRepository             ← Project / comment likes
         ├── FollowRepository           ← Follower graph
         ├── SaveRepository             ← Bookmarks
         ├── CollectionRepository       ← Collections and entries
         └── NotificationRepository     ← Notification storage

Usage Example:
==============
    from src.shared.repositories import ProjectRepository, ProjectFilter

    rows = await ProjectRepository(db).fetch_feed_rows(
        ProjectFilter(tag="branding"), FeedSort.POPULAR, limit=12, offset=0,
    )
"""

from src.shared.repositories.base import BaseRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.repositories.project_repository import ProjectRepository, ProjectFilter
from src.shared.repositories.comment_repository import CommentRepository
from src.shared.repositories.like_repository import LikeRepository
from src.shared.repositories.follow_repository import FollowRepository
from src.shared.repositories.save_repository import SaveRepository
from src.shared.repositories.collection_repository import CollectionRepository
from src.shared.repositories.notification_repository import NotificationRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ProjectRepository",
    "ProjectFilter",
    "CommentRepository",
    "LikeRepository",
    "FollowRepository",
    "SaveRepository",
    "CollectionRepository",
    "NotificationRepository",
]
