import pytest
from pydantic import ValidationError as PydanticValidationError

from src.shared.core.exceptions import ConflictError, UserNotFoundError
from src.shared.models import Follow
from src.shared.schemas.user import UpdateProfileRequest
from src.shared.services.social_service import SocialService
from src.shared.services.user_service import UserService


class TestProfiles:
    """Profile upsert and profile page"""

    async def test_upsert_creates_then_updates(self, db):
        service = UserService(db)

        created = await service.upsert_profile(
            "idp|1", UpdateProfileRequest(username="ana.design", display_name="Ana")
        )
        updated = await service.upsert_profile(
            "idp|1", UpdateProfileRequest(username="ana", bio="Type designer")
        )

        assert created.name == "Ana"
        assert updated.id == "idp|1"
        assert updated.username == "ana"
        assert updated.name == "ana"
        assert updated.bio == "Type designer"

    async def test_username_taken(self, db, factory):
        await factory.user("u1", username="taken")

        with pytest.raises(ConflictError):
            await UserService(db).upsert_profile("u2", UpdateProfileRequest(username="taken"))

    def test_username_format(self):
        with pytest.raises(PydanticValidationError):
            UpdateProfileRequest(username="no spaces allowed")
        with pytest.raises(PydanticValidationError):
            UpdateProfileRequest(username="ab")

    async def test_profile_stats(self, db, factory):
        ana = await factory.user("ana", username="ana")
        fan = await factory.user("fan")
        await factory.user("idol")
        project = await factory.project(ana, title="Public")
        await factory.project(ana, title="Draft", is_public=False)
        db.add_all([
            Follow(follower_id=fan.id, following_id=ana.id),
            Follow(follower_id=ana.id, following_id="idol"),
        ])
        await db.flush()
        await SocialService(db).like_project(fan.id, project.id)

        as_fan = await UserService(db).get_profile("ana", fan.id)

        assert as_fan.stats.projects == 1
        assert as_fan.stats.followers == 1
        assert as_fan.stats.following == 1
        assert as_fan.stats.likes == 1
        assert as_fan.is_following is True
        assert as_fan.is_own_profile is False
        assert [p.title for p in as_fan.projects] == ["Public"]

    async def test_owner_sees_private_projects(self, db, factory):
        ana = await factory.user("ana", username="ana")
        await factory.project(ana, title="Public")
        await factory.project(ana, title="Draft", is_public=False)

        own = await UserService(db).get_profile("ana", ana.id)

        assert own.is_own_profile is True
        assert own.stats.projects == 2
        assert {p.title for p in own.projects} == {"Public", "Draft"}

    async def test_unknown_username(self, db):
        with pytest.raises(UserNotFoundError):
            await UserService(db).get_profile("nobody")


class TestMentionSuggestions:
    """@mention autocomplete"""

    async def test_matches_username_or_name_excluding_viewer(self, db, factory):
        await factory.user("viewer", username="anaviewer")
        await factory.user("u1", username="ana.design")
        await factory.user("u2", username="bob", display_name="Anabel")
        await factory.user("u3", username="carl")

        suggestions = await UserService(db).mention_suggestions("@ana", "viewer")

        assert [s.username for s in suggestions] == ["ana.design", "bob"]

    async def test_blank_partial(self, db, factory):
        await factory.user("u1", username="ana")

        assert await UserService(db).mention_suggestions("  @ ", "viewer") == []

    async def test_limit_is_capped(self, db, factory):
        for i in range(25):
            await factory.user(f"u{i}", username=f"user{i:02d}")

        suggestions = await UserService(db).mention_suggestions("user", "viewer", limit=50)

        assert len(suggestions) == 20
