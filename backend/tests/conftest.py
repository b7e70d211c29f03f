"""
Shared fixtures.

The database is an in-memory SQLite file reached through aiosqlite. The
driver's own transaction handling is switched off and BEGIN is emitted by
SQLAlchemy instead, so SAVEPOINT / ROLLBACK TO behave as on PostgreSQL.
"""

import fnmatch
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.dependencies.database import get_db
from src.api.main import create_application
from src.config.settings import settings
from src.shared.adapters.redis_adapter import RedisAdapter
from src.shared.models import Base, Project, User
from src.shared.services.cache_service import CacheService
from src.shared.utils.security import SecurityUtils


BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# DATABASE
# ═══════════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


class StatementCounter:
    """Counts SELECT statements sent to the database."""

    def __init__(self) -> None:
        self.selects = 0

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            self.selects += 1

    def reset(self) -> None:
        self.selects = 0


@pytest.fixture
def statements(engine):
    counter = StatementCounter()
    event.listen(engine.sync_engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine.sync_engine, "before_cursor_execute", counter)


# ═══════════════════════════════════════════════════════════════════════════════
# DATA
# ═══════════════════════════════════════════════════════════════════════════════


class Factory:
    """Inserts users and projects with predictable timestamps."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._projects = 0

    async def user(
        self,
        user_id: str,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> User:
        user = User(
            id=user_id,
            username=username or user_id,
            display_name=display_name,
            bio=bio,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def project(
        self,
        owner: User,
        title: Optional[str] = None,
        tags: tuple[str, ...] = (),
        is_public: bool = True,
        slides: Optional[list[str]] = None,
        like_count: int = 0,
        age_minutes: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Project:
        """Each new project is one minute newer than the previous one by default."""
        self._projects += 1
        if age_minutes is None:
            age_minutes = 1000 - self._projects
        project = Project(
            user_id=owner.id,
            title=title or f"Project {self._projects}",
            description=description,
            slide_urls=slides if slides is not None else [
                f"https://cdn.test/{self._projects}/{i}.png" for i in range(1, 4)
            ],
            tags=list(tags),
            is_public=is_public,
            like_count=like_count,
            created_at=BASE_TIME - timedelta(minutes=age_minutes),
        )
        self.session.add(project)
        await self.session.flush()
        return project


@pytest.fixture
def factory(db):
    return Factory(db)


# ═══════════════════════════════════════════════════════════════════════════════
# CACHE
# ═══════════════════════════════════════════════════════════════════════════════


class FakeClock:
    """Millisecond clock moved by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeRedisClient:
    """The subset of redis.asyncio.Redis used by RedisAdapter."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = False
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("Connection refused")

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl

    async def scan(self, cursor, match="*", count=None):
        self._check()
        return 0, [key for key in self.store if fnmatch.fnmatchcase(key, match)]

    async def delete(self, *keys):
        self._check()
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def redis_client():
    return FakeRedisClient()


@pytest.fixture
def remote_cache(clock, redis_client):
    adapter = RedisAdapter(url="redis://fake:6379/0", client=redis_client)
    return CacheService(adapter, clock=clock)


@pytest.fixture
def memory_cache(clock):
    return CacheService(None, clock=clock)


# ═══════════════════════════════════════════════════════════════════════════════
# API
# ═══════════════════════════════════════════════════════════════════════════════


def auth_headers(user_id: str) -> dict[str, str]:
    token = SecurityUtils.create_access_token({"sub": user_id}, settings.SECRET_KEY)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def client(session_factory, memory_cache):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_application(cache=memory_cache)
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
