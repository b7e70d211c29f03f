"""
Folio Backend

Social portfolio sharing for designers: projects, a discover feed,
likes, saves, comments, follows, collections and notifications.

Package Structure:
==================
    src/
    ├── api/        ← FastAPI application
    ├── shared/     ← Shared code (models, services, etc.)
    └── config/     ← Configuration

Running the Application:
========================
    # API Server
    uvicorn src.api.main:app --reload

    # Migrations
    alembic upgrade head
"""
