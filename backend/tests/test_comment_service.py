from datetime import timedelta
from uuid import uuid4

import pytest

from src.shared.core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    ProjectNotFoundError,
    ValidationError,
)
from src.shared.models import Comment, Like, NotificationType
from src.shared.repositories.notification_repository import NotificationRepository
from src.shared.schemas.comment import CreateCommentRequest, UpdateCommentRequest
from src.shared.services.comment_query_service import CommentQueryService
from src.shared.services.comment_service import CommentService, parse_mentions

from tests.conftest import BASE_TIME


async def _inbox(db, user_id):
    return await NotificationRepository(db).list_for_user(user_id, limit=100)


def _comment(project, author, content, minutes, parent=None):
    return Comment(
        project_id=project.id,
        user_id=author.id,
        parent_id=parent.id if parent is not None else None,
        content=content,
        tags=[],
        created_at=BASE_TIME + timedelta(minutes=minutes),
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )


class TestParseMentions:
    """@username extraction"""

    def test_mentions_in_order_without_duplicates(self):
        text = "Nice work @ana.design! cc @bob_ @ana.design and @c-3po"

        assert parse_mentions(text) == ["ana.design", "bob_", "c-3po"]

    def test_no_mentions(self):
        assert parse_mentions("no handles here, just an email-less note") == []


class TestCommentQuery:
    """Threaded listing"""

    async def test_top_level_newest_first_replies_oldest_first(self, db, factory, statements):
        """Two statements: one for the page, one for all replies"""
        owner = await factory.user("owner")
        reader = await factory.user("reader")
        project = await factory.project(owner)

        first = _comment(project, owner, "first", 0)
        second = _comment(project, reader, "second", 10)
        db.add_all([first, second])
        await db.flush()
        db.add_all([
            _comment(project, reader, "late reply", 5, parent=first),
            _comment(project, owner, "early reply", 1, parent=first),
        ])
        await db.flush()

        statements.reset()
        items = await CommentQueryService(db).query_comments(project.id, viewer_id=reader.id)

        assert statements.selects == 2
        assert [c.content for c in items] == ["second", "first"]
        assert [r.content for r in items[1].replies] == ["early reply", "late reply"]
        assert items[1].reply_count == 2
        assert items[0].replies == []

    async def test_like_flags_are_per_viewer(self, db, factory):
        owner = await factory.user("owner")
        fan = await factory.user("fan")
        project = await factory.project(owner)
        comment = _comment(project, owner, "hello", 0)
        db.add(comment)
        await db.flush()
        db.add(Like(user_id=fan.id, comment_id=comment.id))
        await db.flush()

        service = CommentQueryService(db)
        [as_fan] = await service.query_comments(project.id, viewer_id=fan.id)
        [as_owner] = await service.query_comments(project.id, viewer_id=owner.id)
        [anonymous] = await service.query_comments(project.id)

        assert as_fan.likes == 1
        assert as_fan.is_liked is True
        assert as_owner.is_liked is False
        assert anonymous.is_liked is False

    async def test_count_ignores_replies(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner)
        top = _comment(project, owner, "top", 0)
        db.add(top)
        await db.flush()
        db.add(_comment(project, owner, "reply", 1, parent=top))
        await db.flush()

        assert await CommentQueryService(db).count_comments(project.id) == 1


class TestCreateComment:
    """Posting comments and replies"""

    async def test_comment_notifies_project_owner(self, db, factory):
        owner = await factory.user("owner")
        author = await factory.user("author", display_name="Author")
        project = await factory.project(owner, title="Poster")

        item = await CommentService(db).create_comment(
            author.id, CreateCommentRequest(content="  Great colours  ", project_id=project.id)
        )

        assert item.content == "Great colours"
        assert item.user.name == "Author"
        [notification] = await _inbox(db, owner.id)
        assert notification.type == NotificationType.PROJECT_COMMENT
        assert notification.action_url == f"/project/{project.id}"

    async def test_own_project_comment_notifies_nobody(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner)

        await CommentService(db).create_comment(
            owner.id, CreateCommentRequest(content="Update: v2 slides", project_id=project.id)
        )

        assert await _inbox(db, owner.id) == []

    async def test_reply_notifies_parent_author_only(self, db, factory):
        owner = await factory.user("owner")
        commenter = await factory.user("commenter")
        replier = await factory.user("replier")
        project = await factory.project(owner)
        service = CommentService(db)

        parent = await service.create_comment(
            commenter.id, CreateCommentRequest(content="Question?", project_id=project.id)
        )
        owner_inbox_before = len(await _inbox(db, owner.id))

        reply = await service.create_comment(
            replier.id, CreateCommentRequest(content="Answer", parent_id=parent.id)
        )

        assert reply.parent_id == parent.id
        assert reply.project_id == project.id
        [notification] = await _inbox(db, commenter.id)
        assert notification.type == NotificationType.COMMENT_REPLY
        assert len(await _inbox(db, owner.id)) == owner_inbox_before

    async def test_reply_to_reply_attaches_to_root(self, db, factory):
        """Threads are two levels deep"""
        owner = await factory.user("owner")
        project = await factory.project(owner)
        service = CommentService(db)

        root = await service.create_comment(
            owner.id, CreateCommentRequest(content="root", project_id=project.id)
        )
        reply = await service.create_comment(
            owner.id, CreateCommentRequest(content="reply", parent_id=root.id)
        )
        nested = await service.create_comment(
            owner.id, CreateCommentRequest(content="nested", parent_id=reply.id)
        )

        assert nested.parent_id == root.id

    async def test_mentions_notify_each_user_once(self, db, factory):
        """The author and users already notified are not mentioned again"""
        owner = await factory.user("owner")
        author = await factory.user("author")
        friend = await factory.user("friend")
        project = await factory.project(owner)

        await CommentService(db).create_comment(
            author.id,
            CreateCommentRequest(
                content="@friend @owner @author @ghost look @friend",
                project_id=project.id,
            ),
        )

        friend_inbox = await _inbox(db, friend.id)
        owner_inbox = await _inbox(db, owner.id)
        assert [n.type for n in friend_inbox] == [NotificationType.MENTION]
        assert [n.type for n in owner_inbox] == [NotificationType.PROJECT_COMMENT]
        assert await _inbox(db, author.id) == []

    async def test_blank_content_rejected(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner)

        with pytest.raises(ValidationError):
            await CommentService(db).create_comment(
                owner.id, CreateCommentRequest(content="   ", project_id=project.id)
            )

    async def test_parent_on_other_project_rejected(self, db, factory):
        owner = await factory.user("owner")
        first = await factory.project(owner)
        second = await factory.project(owner)
        service = CommentService(db)
        parent = await service.create_comment(
            owner.id, CreateCommentRequest(content="hi", project_id=first.id)
        )

        with pytest.raises(ValidationError):
            await service.create_comment(
                owner.id,
                CreateCommentRequest(content="hi", project_id=second.id, parent_id=parent.id),
            )

    async def test_unknown_parent(self, db, factory):
        owner = await factory.user("owner")

        with pytest.raises(CommentNotFoundError):
            await CommentService(db).create_comment(
                owner.id, CreateCommentRequest(content="hi", parent_id=uuid4())
            )

    async def test_private_project_hidden_from_others(self, db, factory):
        owner = await factory.user("owner")
        other = await factory.user("other")
        project = await factory.project(owner, is_public=False)
        service = CommentService(db)

        with pytest.raises(ProjectNotFoundError):
            await service.create_comment(
                other.id, CreateCommentRequest(content="hi", project_id=project.id)
            )
        with pytest.raises(ProjectNotFoundError):
            await service.list_comments(project.id, viewer_id=other.id)

        listing = await service.list_comments(project.id, viewer_id=owner.id)
        assert listing.total == 0


class TestEditAndDelete:
    """Author-only changes"""

    async def test_update_by_author(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner)
        service = CommentService(db)
        created = await service.create_comment(
            owner.id, CreateCommentRequest(content="draft", project_id=project.id)
        )

        updated = await service.update_comment(
            owner.id, created.id, UpdateCommentRequest(content="final", tags=["wip"])
        )

        assert updated.content == "final"
        assert updated.tags == ["wip"]

    async def test_update_by_other_user_forbidden(self, db, factory):
        owner = await factory.user("owner")
        other = await factory.user("other")
        project = await factory.project(owner)
        service = CommentService(db)
        created = await service.create_comment(
            owner.id, CreateCommentRequest(content="mine", project_id=project.id)
        )

        with pytest.raises(AuthorizationError):
            await service.update_comment(other.id, created.id, UpdateCommentRequest(content="x"))
        with pytest.raises(AuthorizationError):
            await service.delete_comment(other.id, created.id)

    async def test_delete_removes_replies(self, db, factory):
        owner = await factory.user("owner")
        project = await factory.project(owner)
        service = CommentService(db)
        root = await service.create_comment(
            owner.id, CreateCommentRequest(content="root", project_id=project.id)
        )
        await service.create_comment(
            owner.id, CreateCommentRequest(content="reply", parent_id=root.id)
        )

        await service.delete_comment(owner.id, root.id)

        listing = await service.list_comments(project.id, viewer_id=owner.id)
        assert listing.comments == []
        assert listing.total == 0
