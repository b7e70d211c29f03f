from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError

from src.shared.models import Notification, NotificationType
from src.shared.repositories.notification_repository import NotificationRepository
from src.shared.services.notification_service import (
    FOLLOWER_MILESTONES,
    PROJECT_LIKE_MILESTONES,
    NotificationService,
    NotificationTemplates,
    is_milestone,
    truncate_excerpt,
)


def _payload(user_id, title="Hello"):
    return NotificationTemplates.project_liked(title, "Poster", "p1").for_user(user_id)


class TestMilestones:
    """Exact membership, never a modulus"""

    def test_project_like_thresholds(self):
        assert [n for n in range(1, 1001) if is_milestone(n, PROJECT_LIKE_MILESTONES)] == [
            10, 25, 50, 100, 250, 500, 1000,
        ]

    def test_multiples_are_not_milestones(self):
        assert is_milestone(20, PROJECT_LIKE_MILESTONES) is False
        assert is_milestone(2000, FOLLOWER_MILESTONES) is False

    def test_follower_thresholds(self):
        assert is_milestone(10, FOLLOWER_MILESTONES) is True
        assert is_milestone(11, FOLLOWER_MILESTONES) is False


class TestTemplates:
    """Notification wording"""

    def test_project_liked(self):
        content = NotificationTemplates.project_liked("Ana", "Poster", "p1")

        assert content.type == NotificationType.PROJECT_LIKE
        assert content.title == "Ana liked your project"
        assert content.message == 'Ana liked "Poster"'
        assert content.action_url == "/project/p1"

    def test_user_followed_links_to_profile(self):
        content = NotificationTemplates.user_followed("Ana", "ana.design")

        assert content.type == NotificationType.NEW_FOLLOWER
        assert content.action_url == "/profile/ana.design"

    def test_milestones_share_type(self):
        assert NotificationTemplates.first_project_like("Poster", "p1").type == NotificationType.MILESTONE
        assert NotificationTemplates.project_popular("Poster", 10, "p1").message == (
            '"Poster" has reached 10 likes!'
        )
        assert "25 followers" in NotificationTemplates.follower_milestone(25, "ana").message

    def test_truncate_excerpt(self):
        assert truncate_excerpt("short") == "short"
        assert truncate_excerpt("x" * 50) == "x" * 50
        assert truncate_excerpt("x" * 51) == "x" * 50 + "..."

    def test_payloads_are_hashable_for_dedupe(self):
        assert len({_payload("u1"), _payload("u1"), _payload("u2")}) == 2


class TestDelivery:
    """Best-effort inserts"""

    async def test_batch_dedupes(self, db, factory):
        await factory.user("u1")
        service = NotificationService(db)

        stored = await service.notify_batch([_payload("u1"), _payload("u1")])

        assert stored == 1
        assert await service.unread_count("u1") == 1

    async def test_empty_batch(self, db):
        assert await NotificationService(db).notify_batch([]) == 0

    async def test_bad_record_dropped_others_kept(self, db, factory):
        """A failing bulk insert falls back to single inserts"""
        await factory.user("u1")
        await factory.user("u2")
        service = NotificationService(db)

        stored = await service.notify_batch(
            [_payload("u1"), _payload("missing-user"), _payload("u2")]
        )

        assert stored == 2
        assert await service.unread_count("u1") == 1
        assert await service.unread_count("u2") == 1

    async def test_notify_never_raises(self, db, factory, monkeypatch):
        await factory.user("u1")
        service = NotificationService(db)

        async def broken_create(**kwargs):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(service.repo, "create", broken_create)

        result = await service.notify(
            "u1", NotificationType.MENTION, "title", "message", "/project/p1"
        )

        assert result is None

    async def test_failed_notification_keeps_earlier_writes(self, db, factory):
        """Only the notification's own savepoint is rolled back"""
        user = await factory.user("u1", display_name="Before")
        service = NotificationService(db)

        user.display_name = "After"
        await db.flush()
        await service.notify("missing-user", NotificationType.MENTION, "t", "m")
        await db.refresh(user)

        assert user.display_name == "After"


class TestInbox:
    """Listing and read state"""

    async def _seed(self, db, user_id, count):
        service = NotificationService(db)
        for i in range(count):
            await service.notify(user_id, NotificationType.MENTION, f"n{i}", "m")
        return service

    async def test_mark_read_only_touches_own(self, db, factory):
        await factory.user("u1")
        await factory.user("u2")
        service = await self._seed(db, "u1", 2)
        await self._seed(db, "u2", 1)
        foreign = (await service.list_notifications("u2"))[0]
        own = (await service.list_notifications("u1"))[0]

        updated = await service.mark_read("u1", [own.id, foreign.id])

        assert updated == 1
        assert await service.unread_count("u1") == 1
        assert await service.unread_count("u2") == 1

    async def test_mark_all_read(self, db, factory):
        await factory.user("u1")
        service = await self._seed(db, "u1", 3)

        assert await service.mark_all_read("u1") == 3
        assert await service.unread_count("u1") == 0
        assert await service.list_notifications("u1", unread_only=True) == []
        assert len(await service.list_notifications("u1")) == 3

    async def test_cleanup_deletes_only_old_read(self, db, factory):
        await factory.user("u1")
        old = datetime.now(timezone.utc) - timedelta(days=45)
        db.add_all([
            Notification(user_id="u1", type=NotificationType.MENTION, title="old read",
                         message="m", is_read=True, created_at=old),
            Notification(user_id="u1", type=NotificationType.MENTION, title="old unread",
                         message="m", is_read=False, created_at=old),
            Notification(user_id="u1", type=NotificationType.MENTION, title="new read",
                         message="m", is_read=True),
        ])
        await db.flush()

        deleted = await NotificationService(db).cleanup_old_notifications(days_old=30)

        remaining = await NotificationRepository(db).list_for_user("u1")
        assert deleted == 1
        assert sorted(n.title for n in remaining) == ["new read", "old unread"]
