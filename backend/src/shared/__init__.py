"""
Shared Module

Domain code used by the API layer and the migrations:
- Models: SQLAlchemy ORM models
- Repositories: Data access layer
- Services: Business logic layer
- Schemas: Pydantic request/response models
- Core: Logging, exceptions
- Adapters: Remote cache client

Package Structure:
==================
    shared/
    ├── core/           ← Logging, exceptions
    ├── db/             ← Database session management
    ├── migrations/     ← Alembic environment and revisions
    ├── models/         ← SQLAlchemy models
    ├── repositories/   ← Data access layer
    ├── services/       ← Business logic
    ├── schemas/        ← Pydantic schemas
    ├── adapters/       ← External services
    └── utils/          ← Token validation

Usage:
======
    from src.shared.models import User, Project
    from src.shared.repositories import ProjectRepository
    from src.shared.services import ProjectService
    from src.shared.schemas import ProjectFeedItem, ProjectFeedPage
    from src.shared.core import logger, FolioException
"""
