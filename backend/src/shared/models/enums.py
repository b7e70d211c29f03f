"""
Enums used across the application.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Kind of event a notification reports."""

    PROJECT_LIKE = "PROJECT_LIKE"
    PROJECT_COMMENT = "PROJECT_COMMENT"
    PROJECT_SAVE = "PROJECT_SAVE"
    NEW_FOLLOWER = "NEW_FOLLOWER"
    COMMENT_REPLY = "COMMENT_REPLY"
    COMMENT_LIKE = "COMMENT_LIKE"
    MENTION = "MENTION"
    MILESTONE = "MILESTONE"


class FeedSort(str, Enum):
    """
    Ordering of project feeds.

    RECENT orders by creation time, POPULAR and LIKES by the denormalized
    like counter. Neither has a secondary tie-break, so rows with equal
    keys come back in whatever order the database produces.
    """

    RECENT = "recent"
    POPULAR = "popular"
    LIKES = "likes"

    @classmethod
    def parse(cls, value: "str | FeedSort | None") -> "FeedSort":
        """Parse a query-string value, falling back to RECENT."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.RECENT
