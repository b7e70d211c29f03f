"""
API Handlers

Route handlers for the Folio API.

Handlers follow the pattern:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

All business logic is delegated to the service layer; application errors
propagate as FolioException and are rendered by the error handler.
"""

from src.api.handlers import (
    collection_handler,
    comment_handler,
    feed_handler,
    follow_handler,
    health_handler,
    notification_handler,
    project_handler,
    user_handler,
)

__all__ = [
    "collection_handler",
    "comment_handler",
    "feed_handler",
    "follow_handler",
    "health_handler",
    "notification_handler",
    "project_handler",
    "user_handler",
]
