"""
Pydantic Schemas

Request and response models for the API. Client-facing payloads are
camelCase on the wire (see common.CamelSchema).

Schema Categories:
==================
- common: Base schemas, pagination, message and health responses
- project: Feed items, pages, project detail, like / save results
- comment: Threaded comments
- notification: Notification listing and read marking
- collection: Collections and their entries
- user: Profiles, search results, mention suggestions, follows

Usage:
======
    from src.shared.schemas.project import ProjectFeedItem, ProjectFeedPage
    from src.shared.schemas.common import PaginationParams, MessageResponse
"""

from src.shared.schemas.common import (
    BaseSchema,
    CamelSchema,
    HealthResponse,
    MessageResponse,
    PaginationParams,
)
from src.shared.schemas.project import (
    CreateProjectRequest,
    FeedUser,
    LikeResponse,
    ProjectDetail,
    ProjectFeedItem,
    ProjectFeedPage,
    SaveStatusResponse,
    UserSummary,
)
from src.shared.schemas.comment import (
    CommentItem,
    CommentLikeResponse,
    CommentListResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from src.shared.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from src.shared.schemas.collection import (
    CollectionDetailResponse,
    CollectionProjectRequest,
    CollectionResponse,
    CreateCollectionRequest,
    UpdateCollectionRequest,
)
from src.shared.schemas.user import (
    FollowRequest,
    FollowResponse,
    MentionSuggestionsResponse,
    SearchResponse,
    UpdateProfileRequest,
    UserProfile,
    UserProfileResponse,
    UserSearchItem,
    UserStats,
)

__all__ = [
    # Common
    "BaseSchema",
    "CamelSchema",
    "HealthResponse",
    "MessageResponse",
    "PaginationParams",
    # Project
    "CreateProjectRequest",
    "FeedUser",
    "LikeResponse",
    "ProjectDetail",
    "ProjectFeedItem",
    "ProjectFeedPage",
    "SaveStatusResponse",
    "UserSummary",
    # Comment
    "CommentItem",
    "CommentLikeResponse",
    "CommentListResponse",
    "CreateCommentRequest",
    "UpdateCommentRequest",
    # Notification
    "MarkReadRequest",
    "MarkReadResponse",
    "NotificationListResponse",
    "NotificationResponse",
    # Collection
    "CollectionDetailResponse",
    "CollectionProjectRequest",
    "CollectionResponse",
    "CreateCollectionRequest",
    "UpdateCollectionRequest",
    # User
    "FollowRequest",
    "FollowResponse",
    "MentionSuggestionsResponse",
    "SearchResponse",
    "UpdateProfileRequest",
    "UserProfile",
    "UserProfileResponse",
    "UserSearchItem",
    "UserStats",
]
