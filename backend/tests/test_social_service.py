from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from src.shared.core.exceptions import (
    ConflictError,
    NotFoundError,
    ProjectNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from src.shared.models import Comment, Follow, NotificationType
from src.shared.repositories.notification_repository import NotificationRepository
from src.shared.services.social_service import SocialService


async def _types(db, user_id):
    notifications = await NotificationRepository(db).list_for_user(user_id, limit=100)
    return sorted(n.type.value for n in notifications)


async def _messages(db, user_id):
    notifications = await NotificationRepository(db).list_for_user(user_id, limit=100)
    return [n.message for n in notifications]


class TestProjectLikes:
    """Like / unlike with the denormalized counter"""

    async def test_like_increments_counter(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)

        likes = await SocialService(db).like_project(fan.id, project.id)

        assert likes == 1
        assert project.like_count == 1

    async def test_duplicate_like_is_conflict_and_counter_unchanged(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        service = SocialService(db)
        await service.like_project(fan.id, project.id)

        with pytest.raises(ConflictError):
            await service.like_project(fan.id, project.id)

        await db.refresh(project)
        assert project.like_count == 1

    async def test_unlike(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        service = SocialService(db)
        await service.like_project(fan.id, project.id)

        assert await service.unlike_project(fan.id, project.id) == 0

        with pytest.raises(NotFoundError):
            await service.unlike_project(fan.id, project.id)

    async def test_unknown_project(self, db, factory):
        fan = await factory.user("fan")

        with pytest.raises(ProjectNotFoundError):
            await SocialService(db).like_project(fan.id, uuid4())

    async def test_first_like_notifies_owner_twice(self, db, factory):
        """The like itself plus the first-like milestone"""
        owner = await factory.user("owner")
        fan = await factory.user("fan", display_name="Fan")
        project = await factory.project(owner, title="Poster")

        await SocialService(db).like_project(fan.id, project.id)

        assert await _types(db, owner.id) == ["MILESTONE", "PROJECT_LIKE"]
        assert 'Fan liked "Poster"' in await _messages(db, owner.id)

    async def test_self_like_notifies_nobody(self, db, factory):
        """No like or first-like milestone for liking your own project"""
        owner = await factory.user("owner")
        project = await factory.project(owner)

        likes = await SocialService(db).like_project(owner.id, project.id)

        assert likes == 1
        assert await _types(db, owner.id) == []

    async def test_self_like_on_threshold_notifies_nobody(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner, like_count=9)

        assert await SocialService(db).like_project(owner.id, project.id) == 10
        assert await _types(db, owner.id) == []

    async def test_popular_milestone_on_exact_threshold(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner, title="Poster", like_count=9)

        likes = await SocialService(db).like_project(fan.id, project.id)

        assert likes == 10
        assert '"Poster" has reached 10 likes!' in await _messages(db, owner.id)

    async def test_no_milestone_off_threshold(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner, like_count=10)

        await SocialService(db).like_project(fan.id, project.id)

        assert await _types(db, owner.id) == ["PROJECT_LIKE"]

    async def test_notification_failure_does_not_undo_like(self, db, factory, monkeypatch):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        service = SocialService(db)

        async def broken(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(service.notifications.repo, "bulk_create", broken)
        monkeypatch.setattr(service.notifications.repo, "create", broken)

        assert await service.like_project(fan.id, project.id) == 1
        await db.refresh(project)
        assert project.like_count == 1
        assert await _types(db, owner.id) == []

    async def test_like_invalidates_listings(self, db, factory, memory_cache):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        await memory_cache.set("discover:projects:page=1", {"stale": True})
        await memory_cache.set("comments:x", {"kept": True})

        await SocialService(db, memory_cache).like_project(fan.id, project.id)

        assert await memory_cache.get("discover:projects:page=1") is None
        assert await memory_cache.get("comments:x") == {"kept": True}


class TestSaves:
    """Bookmark toggle"""

    async def test_toggle_save(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        service = SocialService(db)

        assert await service.toggle_save(fan.id, project.id) is True
        assert await service.is_saved(fan.id, project.id) is True
        assert await service.toggle_save(fan.id, project.id) is False
        assert await service.is_saved(fan.id, project.id) is False

    async def test_save_notifies_owner_once(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)

        await SocialService(db).toggle_save(fan.id, project.id)

        assert await _types(db, owner.id) == ["PROJECT_SAVE"]

    async def test_saving_own_project_is_silent(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner)

        await SocialService(db).toggle_save(owner.id, project.id)

        assert await _types(db, owner.id) == []


class TestFollows:
    """Follower graph"""

    async def test_follow_returns_follower_count(self, db, factory):
        target = await factory.user("target")
        fan = await factory.user("fan")

        assert await SocialService(db).follow(fan.id, target.id) == 1
        assert await _types(db, target.id) == ["NEW_FOLLOWER"]

    async def test_self_follow_rejected(self, db, factory):
        user = await factory.user("u1")

        with pytest.raises(ValidationError):
            await SocialService(db).follow(user.id, user.id)

    async def test_duplicate_follow_conflict(self, db, factory):
        target = await factory.user("target")
        fan = await factory.user("fan")
        service = SocialService(db)
        await service.follow(fan.id, target.id)

        with pytest.raises(ConflictError):
            await service.follow(fan.id, target.id)

    async def test_unknown_target(self, db, factory):
        fan = await factory.user("fan")

        with pytest.raises(UserNotFoundError):
            await SocialService(db).follow(fan.id, "nobody")

    async def test_follower_milestone(self, db, factory):
        target = await factory.user("target")
        for i in range(9):
            follower = await factory.user(f"f{i}")
            db.add(Follow(follower_id=follower.id, following_id=target.id))
        tenth = await factory.user("tenth")
        await db.flush()

        followers = await SocialService(db).follow(tenth.id, target.id)

        assert followers == 10
        assert await _types(db, target.id) == ["MILESTONE", "NEW_FOLLOWER"]

    async def test_follower_milestone_fires_once_per_crossing(self, db, factory):
        """9 -> 10 fires, 10 -> 11 does not, 10 -> 9 -> 10 fires again"""
        target = await factory.user("target")
        fans = [await factory.user(f"fan{i}") for i in range(11)]
        service = SocialService(db)

        for fan in fans[:10]:
            await service.follow(fan.id, target.id)
        assert await _types(db, target.id) == ["MILESTONE"] + ["NEW_FOLLOWER"] * 10

        assert await service.follow(fans[10].id, target.id) == 11
        assert (await _types(db, target.id)).count("MILESTONE") == 1

        await service.unfollow(fans[10].id, target.id)
        assert await service.unfollow(fans[9].id, target.id) == 9
        assert await service.follow(fans[9].id, target.id) == 10

        assert (await _types(db, target.id)).count("MILESTONE") == 2

    async def test_unfollow(self, db, factory):
        target = await factory.user("target")
        fan = await factory.user("fan")
        service = SocialService(db)
        await service.follow(fan.id, target.id)

        assert await service.unfollow(fan.id, target.id) == 0
        with pytest.raises(NotFoundError):
            await service.unfollow(fan.id, target.id)


class TestCommentLikes:
    """Comment like toggle"""

    async def _comment(self, db, project, author, content="Lovely palette"):
        comment = Comment(project_id=project.id, user_id=author.id, content=content, tags=[])
        db.add(comment)
        await db.flush()
        return comment

    async def test_toggle(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        comment = await self._comment(db, project, owner)
        service = SocialService(db)

        assert await service.toggle_comment_like(fan.id, comment.id) == (True, 1)
        assert await service.toggle_comment_like(fan.id, comment.id) == (False, 0)

    async def test_like_notifies_author_with_excerpt(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan", display_name="Fan")
        project = await factory.project(owner)
        comment = await self._comment(db, project, owner, content="y" * 60)

        await SocialService(db).toggle_comment_like(fan.id, comment.id)

        [message] = await _messages(db, owner.id)
        assert message == f'Fan liked your comment: "{"y" * 50}..."'
        assert await _types(db, owner.id) == [NotificationType.COMMENT_LIKE.value]
