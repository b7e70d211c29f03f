"""
Database Module

Database connectivity and session management for Folio.

Architecture Overview:
======================
    FastAPI Route
        │  Dependency Injection: get_db()
        ▼
    AsyncSession (one per request, commit on success, rollback on error)
        │  passed to services, which hand it to repositories
        ▼
    Repositories (ProjectRepository, CommentRepository, FollowRepository, ...)
        │  SQL
        ▼
    PostgreSQL

Usage:
======
    from src.shared.db import get_db

    @router.get("/projects/{project_id}")
    async def get_project(project_id: UUID, db: AsyncSession = Depends(get_db)):
        ...
"""

from src.shared.db.session import (
    get_db,
    init_db,
    close_db,
    check_db_health,
    AsyncSessionLocal,
    engine,
)

__all__ = [
    "get_db",
    "init_db",
    "close_db",
    "check_db_health",
    "AsyncSessionLocal",
    "engine",
]
