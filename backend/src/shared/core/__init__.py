"""
Core Module

Provides core functionality shared across the application:
- Structured logging
- Custom exceptions

Usage:
======
    from src.shared.core.logging import logger, get_logger
    from src.shared.core.exceptions import FolioException, NotFoundError

    logger.info("Collection created", collection_id=str(collection.id))
"""

from src.shared.core.logging import (
    logger,
    get_logger,
    log_context,
    clear_log_context,
)
from src.shared.core.exceptions import (
    FolioException,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    UserNotFoundError,
    ProjectNotFoundError,
    CommentNotFoundError,
    CollectionNotFoundError,
    ValidationError,
    ConflictError,
)

__all__ = [
    # Logging
    "logger",
    "get_logger",
    "log_context",
    "clear_log_context",
    # Exceptions
    "FolioException",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "UserNotFoundError",
    "ProjectNotFoundError",
    "CommentNotFoundError",
    "CollectionNotFoundError",
    "ValidationError",
    "ConflictError",
]
