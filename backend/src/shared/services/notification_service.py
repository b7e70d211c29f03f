"""
Notification Service

Best-effort notification delivery shared by every social action.

DEGRADATION LADDER:
===================
    notify_batch(payloads)
        │  dedupe identical payloads
        ▼
    one bulk INSERT inside a SAVEPOINT ── ok ──► return count
        │ fails
        ▼
    notify() per payload, each in its own SAVEPOINT
        │ a record fails
        ▼
    log and drop that record

A notification failure only rolls back its own SAVEPOINT, never the like,
follow, comment or save that triggered it, and no method here raises.

MILESTONES:
===========
Milestones fire on exact membership of the new count in a fixed set, never
on a modulus. A count that drops below a threshold and climbs back onto it
fires the milestone again, once per crossing.

Usage:
======
    notifier = NotificationService(db)
    payloads = [NotificationTemplates.project_liked(liker, project.title, project.id).for_user(owner_id)]
    if is_milestone(new_count, PROJECT_LIKE_MILESTONES):
        payloads.append(NotificationTemplates.project_popular(project.title, new_count, project.id).for_user(owner_id))
    await notifier.notify_batch(payloads)
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.core.logging import get_logger
from src.shared.models.enums import NotificationType
from src.shared.models.notification import Notification
from src.shared.repositories.notification_repository import NotificationRepository

logger = get_logger(__name__)


FIRST_LIKE_MILESTONE = 1
PROJECT_LIKE_MILESTONES = frozenset({10, 25, 50, 100, 250, 500, 1000})
FOLLOWER_MILESTONES = frozenset({10, 25, 50, 100, 250, 500, 1000})


def is_milestone(count: int, milestones: Iterable[int]) -> bool:
    """True when count is exactly one of the thresholds."""
    return count in milestones


# ═══════════════════════════════════════════════════════════════════════════════
# PAYLOADS AND TEMPLATES
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class NotificationContent:
    """Recipient-independent part of a notification."""

    type: NotificationType
    title: str
    message: str
    action_url: Optional[str] = None

    def for_user(self, user_id: str) -> "NotificationPayload":
        return NotificationPayload(user_id=user_id, **asdict(self))


@dataclass(frozen=True)
class NotificationPayload:
    """Everything needed to store one notification. Hashable for dedupe."""

    user_id: str
    type: NotificationType
    title: str
    message: str
    action_url: Optional[str] = None


def _project_url(project_id: UUID | str) -> str:
    return f"/project/{project_id}"


class NotificationTemplates:
    """Wording of every notification the application sends."""

    @staticmethod
    def project_liked(liker_name: str, project_title: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.PROJECT_LIKE,
            f"{liker_name} liked your project",
            f'{liker_name} liked "{project_title}"',
            _project_url(project_id),
        )

    @staticmethod
    def project_commented(commenter_name: str, project_title: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.PROJECT_COMMENT,
            f"{commenter_name} commented on your project",
            f'{commenter_name} commented on "{project_title}"',
            _project_url(project_id),
        )

    @staticmethod
    def project_saved(saver_name: str, project_title: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.PROJECT_SAVE,
            f"{saver_name} saved your project",
            f'{saver_name} saved "{project_title}"',
            _project_url(project_id),
        )

    @staticmethod
    def user_followed(follower_name: str, follower_username: str) -> NotificationContent:
        return NotificationContent(
            NotificationType.NEW_FOLLOWER,
            f"{follower_name} started following you",
            f"{follower_name} is now following your work",
            f"/profile/{follower_username}",
        )

    @staticmethod
    def comment_reply(replier_name: str, project_title: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.COMMENT_REPLY,
            f"{replier_name} replied to your comment",
            f'{replier_name} replied to your comment on "{project_title}"',
            _project_url(project_id),
        )

    @staticmethod
    def comment_liked(liker_name: str, comment_excerpt: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.COMMENT_LIKE,
            f"{liker_name} liked your comment",
            f'{liker_name} liked your comment: "{comment_excerpt}"',
            _project_url(project_id),
        )

    @staticmethod
    def mention(author_name: str, project_title: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.MENTION,
            f"{author_name} mentioned you",
            f'{author_name} mentioned you in a comment on "{project_title}"',
            _project_url(project_id),
        )

    @staticmethod
    def first_project_like(project_title: str, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.MILESTONE,
            "🎉 First like!",
            f'Your project "{project_title}" received its first like!',
            _project_url(project_id),
        )

    @staticmethod
    def project_popular(project_title: str, like_count: int, project_id) -> NotificationContent:
        return NotificationContent(
            NotificationType.MILESTONE,
            "🔥 Your project is trending!",
            f'"{project_title}" has reached {like_count} likes!',
            _project_url(project_id),
        )

    @staticmethod
    def follower_milestone(follower_count: int, username: str) -> NotificationContent:
        return NotificationContent(
            NotificationType.MILESTONE,
            "🌟 Follower milestone!",
            f"You've reached {follower_count} followers! Keep creating amazing work.",
            f"/profile/{username}",
        )


def truncate_excerpt(text: str, length: int = 50) -> str:
    """Shorten text to length characters followed by '...' when longer."""
    return text if len(text) <= length else f"{text[:length]}..."


# ═══════════════════════════════════════════════════════════════════════════════
# SERVICE
# ═══════════════════════════════════════════════════════════════════════════════


class NotificationService:
    """Creates, lists and maintains notifications."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = NotificationRepository(session)

    # ═══════════════════════════════════════════════════════════════════════════
    # DELIVERY (never raises)
    # ═══════════════════════════════════════════════════════════════════════════

    async def notify(
        self,
        recipient_id: str,
        type: NotificationType,
        title: str,
        message: str,
        action_url: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        Store one notification.

        Returns:
            The stored notification, or None when the insert failed
        """
        try:
            async with self.session.begin_nested():
                return await self.repo.create(
                    user_id=recipient_id,
                    type=type,
                    title=title,
                    message=message,
                    action_url=action_url,
                )
        except SQLAlchemyError as e:
            logger.warning(
                "Notification insert failed",
                recipient_id=recipient_id,
                type=str(type.value if isinstance(type, NotificationType) else type),
                error=str(e),
            )
            return None

    async def notify_payload(self, payload: NotificationPayload) -> Optional[Notification]:
        return await self.notify(
            payload.user_id, payload.type, payload.title, payload.message, payload.action_url
        )

    async def notify_batch(self, payloads: Sequence[NotificationPayload]) -> int:
        """
        Store many notifications: bulk first, then one by one.

        Returns:
            Number of notifications stored
        """
        unique = list(dict.fromkeys(payloads))
        if not unique:
            return 0

        try:
            async with self.session.begin_nested():
                return await self.repo.bulk_create([asdict(p) for p in unique])
        except SQLAlchemyError as e:
            logger.warning(
                "Bulk notification insert failed, falling back to single inserts",
                count=len(unique),
                error=str(e),
            )

        stored = 0
        for payload in unique:
            if await self.notify_payload(payload) is not None:
                stored += 1
        return stored

    # ═══════════════════════════════════════════════════════════════════════════
    # READING AND MAINTENANCE
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_notifications(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> list[Notification]:
        return await self.repo.list_for_user(user_id, limit, offset, unread_only)

    async def unread_count(self, user_id: str) -> int:
        return await self.repo.count_unread(user_id)

    async def mark_read(self, user_id: str, ids: Sequence[UUID]) -> int:
        """Mark some of the recipient's notifications read."""
        return await self.repo.mark_read(user_id, list(ids))

    async def mark_all_read(self, user_id: str) -> int:
        return await self.repo.mark_read(user_id, None)

    async def cleanup_old_notifications(self, days_old: int = 30) -> int:
        """
        Delete read notifications older than days_old days.

        Returns:
            Number of notifications deleted
        """
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        deleted = await self.repo.delete_read_before(cutoff)
        logger.info("Old notifications cleaned up", deleted=deleted, days_old=days_old)
        return deleted
