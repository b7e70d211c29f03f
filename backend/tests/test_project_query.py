from src.shared.models import FeedSort, Follow, Like
from src.shared.repositories.project_repository import ProjectFilter
from src.shared.services.project_query_service import ProjectQueryService


async def _seed_likes(db, project, *users):
    for user in users:
        db.add(Like(user_id=user.id, project_id=project.id))
    await db.flush()


class TestProjectQueryStatements:
    """The feed query costs a fixed number of statements"""

    async def test_anonymous_page_is_one_statement(self, db, factory, statements):
        """Anonymous pages never look up follow state"""
        owner = await factory.user("u1")
        for _ in range(12):
            await factory.project(owner)

        statements.reset()
        items = await ProjectQueryService(db).query_projects(ProjectFilter(), limit=12)

        assert len(items) == 12
        assert statements.selects == 1

    async def test_viewer_page_is_two_statements(self, db, factory, statements):
        """Page size does not change the statement count"""
        viewer = await factory.user("viewer")
        owners = [await factory.user(f"owner{i}") for i in range(5)]
        for owner in owners:
            await factory.project(owner)
            await factory.project(owner)

        statements.reset()
        items = await ProjectQueryService(db).query_projects(
            ProjectFilter(), limit=10, viewer_id=viewer.id
        )

        assert len(items) == 10
        assert statements.selects == 2

    async def test_empty_page_skips_follow_lookup(self, db, factory, statements):
        viewer = await factory.user("viewer")

        statements.reset()
        items = await ProjectQueryService(db).query_projects(
            ProjectFilter(), viewer_id=viewer.id
        )

        assert items == []
        assert statements.selects == 1


class TestProjectQueryHydration:
    """Counts, flags and owner summary on each item"""

    async def test_counts_and_like_flag_are_per_viewer(self, db, factory):
        """isLiked reflects only the viewer's own like"""
        owner = await factory.user("owner", display_name="Ana Ramos")
        alice = await factory.user("alice")
        bob = await factory.user("bob")
        project = await factory.project(owner)
        await _seed_likes(db, project, alice)

        service = ProjectQueryService(db)
        [as_alice] = await service.query_projects(ProjectFilter(), viewer_id=alice.id)
        [as_bob] = await service.query_projects(ProjectFilter(), viewer_id=bob.id)
        [anonymous] = await service.query_projects(ProjectFilter())

        assert as_alice.likes == as_bob.likes == anonymous.likes == 1
        assert as_alice.is_liked is True
        assert as_bob.is_liked is False
        assert anonymous.is_liked is False
        assert as_alice.user.name == "Ana Ramos"

    async def test_following_flag(self, db, factory):
        viewer = await factory.user("viewer")
        followed = await factory.user("followed")
        stranger = await factory.user("stranger")
        await factory.project(followed)
        await factory.project(stranger)
        db.add(Follow(follower_id=viewer.id, following_id=followed.id))
        await db.flush()

        items = await ProjectQueryService(db).query_projects(
            ProjectFilter(), viewer_id=viewer.id
        )
        flags = {item.user.id: item.user.is_following for item in items}

        assert flags == {"followed": True, "stranger": False}

    async def test_name_falls_back_to_username(self, db, factory):
        owner = await factory.user("u1", username="plainname")
        await factory.project(owner)

        [item] = await ProjectQueryService(db).query_projects(ProjectFilter())

        assert item.user.name == "plainname"

    async def test_images_limited_and_cover_is_first_slide(self, db, factory):
        """Feeds carry at most five slides; the cover is the first"""
        owner = await factory.user("u1")
        slides = [f"https://cdn.test/s{i}.png" for i in range(8)]
        await factory.project(owner, slides=slides)

        [item] = await ProjectQueryService(db).query_projects(ProjectFilter())

        assert item.cover_image == slides[0]
        assert item.images == slides[:5]

    async def test_anonymous_viewer_follows_nobody(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner)

        [item] = await ProjectQueryService(db).query_projects(ProjectFilter())

        assert item.user.is_following is False


class TestProjectQueryFilters:
    """Visibility, tag, owner and sort"""

    async def test_private_projects_hidden_by_default(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner, title="Public")
        await factory.project(owner, title="Hidden", is_public=False)

        service = ProjectQueryService(db)
        items = await service.query_projects(ProjectFilter())

        assert [item.title for item in items] == ["Public"]
        assert await service.count_projects(ProjectFilter()) == 1
        assert await service.count_projects(ProjectFilter(is_public=None)) == 2

    async def test_tag_filter_is_exact_membership(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner, title="Logo", tags=("branding", "logo"))
        await factory.project(owner, title="Poster", tags=("print",))
        await factory.project(owner, title="Brand book", tags=("branding-guide",))

        items = await ProjectQueryService(db).query_projects(ProjectFilter(tag="branding"))

        assert [item.title for item in items] == ["Logo"]

    async def test_recent_is_newest_first(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner, title="Old", age_minutes=60)
        await factory.project(owner, title="New", age_minutes=1)
        await factory.project(owner, title="Middle", age_minutes=30)

        items = await ProjectQueryService(db).query_projects(ProjectFilter(), FeedSort.RECENT)

        assert [item.title for item in items] == ["New", "Middle", "Old"]

    async def test_popular_is_most_liked_first(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner, title="Quiet", like_count=1)
        await factory.project(owner, title="Hit", like_count=40)
        await factory.project(owner, title="Okay", like_count=7)

        items = await ProjectQueryService(db).query_projects(ProjectFilter(), FeedSort.POPULAR)

        assert [item.title for item in items] == ["Hit", "Okay", "Quiet"]

    def test_unknown_sort_falls_back_to_recent(self):
        assert FeedSort.parse("sideways") is FeedSort.RECENT
        assert FeedSort.parse(None) is FeedSort.RECENT
        assert FeedSort.parse("LIKES") is FeedSort.LIKES

    async def test_empty_owner_list_matches_nothing(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner)

        service = ProjectQueryService(db)

        assert await service.query_projects(ProjectFilter(owner_ids=[])) == []
        assert await service.count_projects(ProjectFilter(owner_ids=[])) == 0

    async def test_text_filter_matches_title_description_and_tags(self, db, factory):
        owner = await factory.user("u1")
        await factory.project(owner, title="Coffee rebrand")
        await factory.project(owner, title="Poster", description="Coffee festival poster")
        await factory.project(owner, title="Mugs", tags=("coffeeshop",))
        await factory.project(owner, title="Unrelated")

        items = await ProjectQueryService(db).query_projects(ProjectFilter(text="coffee"))

        assert {item.title for item in items} == {"Coffee rebrand", "Poster", "Mugs"}

    async def test_pagination_window(self, db, factory):
        owner = await factory.user("u1")
        for i in range(5):
            await factory.project(owner, title=f"P{i}", age_minutes=i)

        service = ProjectQueryService(db)
        page_two = await service.query_projects(ProjectFilter(), limit=2, offset=2)

        assert [item.title for item in page_two] == ["P2", "P3"]
