"""
Collection Handler

    GET    /collections?userId=&includePrivate=     list
    POST   /collections                             create
    GET    /collections/{id}                        detail with projects
    PUT    /collections/{id}                        update (owner)
    DELETE /collections/{id}                        delete (owner)
    POST   /collections/{id}/projects               add a project (owner)
    DELETE /collections/{id}/projects?projectId=    remove a project (owner)
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import CurrentUser, OptionalUser
from src.api.dependencies.services import get_collection_service
from src.shared.schemas.collection import (
    CollectionDetailResponse,
    CollectionProjectRequest,
    CollectionResponse,
    CreateCollectionRequest,
    UpdateCollectionRequest,
)
from src.shared.schemas.common import MessageResponse
from src.shared.services.collection_service import CollectionService


router = APIRouter()


@router.get("", response_model=list[CollectionResponse])
async def list_collections(
    current_user: CurrentUser,
    user_id: Optional[str] = Query(None, alias="userId"),
    include_private: bool = Query(False, alias="includePrivate"),
    collection_service: CollectionService = Depends(get_collection_service),
):
    """
    The caller's collections, or another user's public ones with userId.
    """
    return await collection_service.list_collections(
        current_user["user_id"], owner_id=user_id, include_private=include_private
    )


@router.post(
    "",
    response_model=CollectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_collection(
    request: CreateCollectionRequest,
    current_user: CurrentUser,
    collection_service: CollectionService = Depends(get_collection_service),
):
    return await collection_service.create_collection(current_user["user_id"], request)


@router.get("/{collection_id}", response_model=CollectionDetailResponse)
async def get_collection(
    collection_id: UUID,
    viewer: OptionalUser,
    collection_service: CollectionService = Depends(get_collection_service),
):
    return await collection_service.get_collection(
        collection_id, viewer_id=viewer["user_id"] if viewer else None
    )


@router.put("/{collection_id}", response_model=CollectionResponse)
async def update_collection(
    collection_id: UUID,
    request: UpdateCollectionRequest,
    current_user: CurrentUser,
    collection_service: CollectionService = Depends(get_collection_service),
):
    return await collection_service.update_collection(
        current_user["user_id"], collection_id, request
    )


@router.delete("/{collection_id}", response_model=MessageResponse)
async def delete_collection(
    collection_id: UUID,
    current_user: CurrentUser,
    collection_service: CollectionService = Depends(get_collection_service),
):
    await collection_service.delete_collection(current_user["user_id"], collection_id)
    return MessageResponse(message="Collection deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRIES
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/{collection_id}/projects", response_model=CollectionResponse)
async def add_project(
    collection_id: UUID,
    request: CollectionProjectRequest,
    current_user: CurrentUser,
    collection_service: CollectionService = Depends(get_collection_service),
):
    """Add one of the caller's projects. 409 if already present."""
    return await collection_service.add_project(
        current_user["user_id"], collection_id, request.project_id
    )


@router.delete("/{collection_id}/projects", response_model=CollectionResponse)
async def remove_project(
    collection_id: UUID,
    current_user: CurrentUser,
    project_id: UUID = Query(..., alias="projectId"),
    collection_service: CollectionService = Depends(get_collection_service),
):
    return await collection_service.remove_project(
        current_user["user_id"], collection_id, project_id
    )
