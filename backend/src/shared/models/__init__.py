"""
Folio SQLAlchemy Models

Model Hierarchy:
================
    User
       ├── projects (Project[])
       │      ├── comments (Comment[], two levels: top-level + replies)
       │      ├── likes / saves
       │      └── collection_projects (CollectionProject[])
       ├── follows (Follow[], follower → following)
       ├── collections (Collection[])
       └── notifications (Notification[])

Models Overview:
================
- Base: Declarative base, TimestampMixin, JSONList column type
- User: Public profile keyed by the identity provider subject
- Project: Slides, tags, visibility and denormalized counters
- Comment: Top-level comments and replies
- Like: Like of a project or a comment
- Follow: Follower edge
- Save: Bookmarked project
- Collection / CollectionProject: Curated project groups
- Notification: Per-recipient activity message
"""

from src.shared.models.base import Base, TimestampMixin, JSONList
from src.shared.models.enums import NotificationType, FeedSort
from src.shared.models.user import User
from src.shared.models.project import Project
from src.shared.models.comment import Comment
from src.shared.models.like import Like
from src.shared.models.follow import Follow
from src.shared.models.save import Save
from src.shared.models.collection import Collection, CollectionProject
from src.shared.models.notification import Notification

__all__ = [
    # Base classes and mixins
    "Base",
    "TimestampMixin",
    "JSONList",
    # Enums
    "NotificationType",
    "FeedSort",
    # Models
    "User",
    "Project",
    "Comment",
    "Like",
    "Follow",
    "Save",
    "Collection",
    "CollectionProject",
    "Notification",
]
