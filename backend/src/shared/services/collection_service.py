"""
Collection Service

Business logic for user-curated collections of their own projects.

Invariants:
===========
- name is unique per owner (409 on a duplicate, create or rename)
- a project appears at most once in a collection (409)
- only the owner's own projects can be added (403)
- project_count always equals the number of entries
- cover_image_url is set from the first project added; removing the
  project that provided it falls back to the most recently added one
- private collections are invisible (404) to everyone but the owner
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.core.exceptions import (
    AuthorizationError,
    CollectionNotFoundError,
    ConflictError,
    NotFoundError,
    ProjectNotFoundError,
    UserNotFoundError,
)
from src.shared.core.logging import get_logger
from src.shared.models.collection import Collection
from src.shared.models.enums import FeedSort
from src.shared.repositories.collection_repository import CollectionRepository
from src.shared.repositories.project_repository import ProjectFilter, ProjectRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.schemas.collection import (
    CollectionDetailResponse,
    CollectionResponse,
    CreateCollectionRequest,
    UpdateCollectionRequest,
)
from src.shared.services.project_query_service import ProjectQueryService

logger = get_logger(__name__)


COLLECTION_PROJECTS_LIMIT = 100


class CollectionService:
    """CRUD for collections and their project entries."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.collection_repo = CollectionRepository(session)
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)
        self.query = ProjectQueryService(session)

    async def _get_visible(self, collection_id: UUID, viewer_id: Optional[str]) -> Collection:
        collection = await self.collection_repo.get(collection_id)
        if collection is None or (not collection.is_public and collection.user_id != viewer_id):
            raise CollectionNotFoundError(str(collection_id))
        return collection

    async def _get_owned(self, collection_id: UUID, viewer_id: str) -> Collection:
        collection = await self.collection_repo.get(collection_id)
        if collection is None:
            raise CollectionNotFoundError(str(collection_id))
        if collection.user_id != viewer_id:
            raise AuthorizationError()
        return collection

    async def _flush_unique(self, message: str) -> None:
        try:
            async with self.session.begin_nested():
                await self.session.flush()
        except IntegrityError:
            raise ConflictError(message)

    # ═══════════════════════════════════════════════════════════════════════════
    # COLLECTIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_collections(
        self,
        viewer_id: str,
        owner_id: Optional[str] = None,
        include_private: bool = False,
    ) -> list[CollectionResponse]:
        """
        List a user's collections.

        Private collections are included only when the viewer lists their
        own collections and asks for them.
        """
        owner_id = owner_id or viewer_id
        include_private = include_private and owner_id == viewer_id
        collections = await self.collection_repo.list_for_user(owner_id, include_private)
        return [CollectionResponse.model_validate(c) for c in collections]

    async def create_collection(
        self, viewer_id: str, request: CreateCollectionRequest
    ) -> CollectionResponse:
        if not await self.user_repo.exists(viewer_id):
            raise UserNotFoundError(viewer_id)

        try:
            async with self.session.begin_nested():
                collection = await self.collection_repo.create(
                    user_id=viewer_id,
                    name=request.name,
                    description=request.description,
                    is_public=request.is_public,
                )
        except IntegrityError:
            raise ConflictError("A collection with this name already exists")

        logger.info("Collection created", collection_id=str(collection.id), owner_id=viewer_id)
        return CollectionResponse.model_validate(collection)

    async def get_collection(
        self, collection_id: UUID, viewer_id: Optional[str] = None
    ) -> CollectionDetailResponse:
        """A collection with its projects, newest first."""
        collection = await self._get_visible(collection_id, viewer_id)
        is_owner = collection.user_id == viewer_id

        projects = await self.query.query_projects(
            ProjectFilter(is_public=None if is_owner else True, collection_id=collection.id),
            FeedSort.RECENT,
            COLLECTION_PROJECTS_LIMIT,
            0,
            viewer_id,
        )
        summary = CollectionResponse.model_validate(collection)
        return CollectionDetailResponse(**summary.model_dump(), projects=projects)

    async def update_collection(
        self,
        viewer_id: str,
        collection_id: UUID,
        request: UpdateCollectionRequest,
    ) -> CollectionResponse:
        collection = await self._get_owned(collection_id, viewer_id)

        if request.name is not None:
            collection.name = request.name
        if request.description is not None:
            collection.description = request.description
        if request.is_public is not None:
            collection.is_public = request.is_public

        await self._flush_unique("A collection with this name already exists")
        await self.session.refresh(collection)
        return CollectionResponse.model_validate(collection)

    async def delete_collection(self, viewer_id: str, collection_id: UUID) -> None:
        await self._get_owned(collection_id, viewer_id)
        await self.collection_repo.delete(collection_id)
        logger.info("Collection deleted", collection_id=str(collection_id), owner_id=viewer_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # ENTRIES
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_project(
        self, viewer_id: str, collection_id: UUID, project_id: UUID
    ) -> CollectionResponse:
        """
        Add one of the viewer's projects to one of their collections.

        Raises:
            CollectionNotFoundError / ProjectNotFoundError: Unknown ids
            AuthorizationError: Collection or project owned by someone else
            ConflictError: Project already in the collection
        """
        collection = await self._get_owned(collection_id, viewer_id)

        project = await self.project_repo.get(project_id)
        if project is None:
            raise ProjectNotFoundError(str(project_id))
        if project.user_id != viewer_id:
            raise AuthorizationError("You can only add your own projects to collections")

        try:
            async with self.session.begin_nested():
                await self.collection_repo.add_entry(collection_id, project_id)
        except IntegrityError:
            raise ConflictError("Project is already in this collection")

        collection.project_count = await self.collection_repo.count_entries(collection_id)
        if not collection.cover_image_url and project.cover_image:
            collection.cover_image_url = project.cover_image
        await self.session.flush()
        await self.session.refresh(collection)

        logger.info(
            "Project added to collection",
            collection_id=str(collection_id),
            project_id=str(project_id),
        )
        return CollectionResponse.model_validate(collection)

    async def remove_project(
        self, viewer_id: str, collection_id: UUID, project_id: UUID
    ) -> CollectionResponse:
        collection = await self._get_owned(collection_id, viewer_id)
        project = await self.project_repo.get(project_id)

        if not await self.collection_repo.remove_entry(collection_id, project_id):
            raise NotFoundError("Collection entry")

        collection.project_count = await self.collection_repo.count_entries(collection_id)
        removed_cover = project.cover_image if project is not None else None
        if collection.cover_image_url is not None and collection.cover_image_url == removed_cover:
            collection.cover_image_url = await self.collection_repo.latest_cover(collection_id)
        await self.session.flush()
        await self.session.refresh(collection)
        return CollectionResponse.model_validate(collection)
