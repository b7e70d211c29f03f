"""
Project Handler

Publishing, viewing and engaging with a single project.

    POST   /projects                      publish (auth)
    GET    /projects/{id}                 detail, counts a view
    DELETE /projects/{id}                 owner only
    POST   /projects/{id}/like            like (auth)
    DELETE /projects/{id}/like            unlike (auth)
    POST   /projects/{id}/save            toggle save (auth)
    GET    /projects/{id}/save            saved state (auth)
    GET    /projects/{id}/comments        threaded comments

ARCHITECTURE:
=============
    Handler → Service → Repository → Model

Handlers should ONLY:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

Business logic belongs in the SERVICE layer.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import CurrentUser, OptionalUser
from src.api.dependencies.services import (
    get_comment_service,
    get_project_service,
    get_social_service,
)
from src.shared.schemas.comment import CommentListResponse
from src.shared.schemas.common import MessageResponse
from src.shared.schemas.project import (
    CreateProjectRequest,
    LikeResponse,
    ProjectDetail,
    SaveStatusResponse,
)
from src.shared.services.comment_service import CommentService
from src.shared.services.project_service import ProjectService
from src.shared.services.social_service import SocialService


router = APIRouter()


@router.post(
    "",
    response_model=ProjectDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    request: CreateProjectRequest,
    current_user: CurrentUser,
    project_service: ProjectService = Depends(get_project_service),
):
    """
    Publish a project.

    Slides are URLs of images already uploaded to object storage.
    """
    return await project_service.create_project(current_user["user_id"], request)


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: UUID,
    viewer: OptionalUser,
    project_service: ProjectService = Depends(get_project_service),
):
    """Project detail. Private projects are visible to their owner only."""
    return await project_service.get_project(
        project_id, viewer_id=viewer["user_id"] if viewer else None
    )


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: UUID,
    current_user: CurrentUser,
    project_service: ProjectService = Depends(get_project_service),
):
    await project_service.delete_project(current_user["user_id"], project_id)
    return MessageResponse(message="Project deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# LIKES AND SAVES
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/{project_id}/like", response_model=LikeResponse)
async def like_project(
    project_id: UUID,
    current_user: CurrentUser,
    social_service: SocialService = Depends(get_social_service),
):
    """Like a project. 409 if already liked."""
    likes = await social_service.like_project(current_user["user_id"], project_id)
    return LikeResponse(liked=True, likes=likes)


@router.delete("/{project_id}/like", response_model=LikeResponse)
async def unlike_project(
    project_id: UUID,
    current_user: CurrentUser,
    social_service: SocialService = Depends(get_social_service),
):
    """Remove a like. 404 if not liked."""
    likes = await social_service.unlike_project(current_user["user_id"], project_id)
    return LikeResponse(liked=False, likes=likes)


@router.post("/{project_id}/save", response_model=SaveStatusResponse)
async def toggle_save(
    project_id: UUID,
    current_user: CurrentUser,
    social_service: SocialService = Depends(get_social_service),
):
    """Save the project, or unsave it when already saved."""
    saved = await social_service.toggle_save(current_user["user_id"], project_id)
    return SaveStatusResponse(saved=saved)


@router.get("/{project_id}/save", response_model=SaveStatusResponse)
async def save_status(
    project_id: UUID,
    current_user: CurrentUser,
    social_service: SocialService = Depends(get_social_service),
):
    saved = await social_service.is_saved(current_user["user_id"], project_id)
    return SaveStatusResponse(saved=saved)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMENTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/{project_id}/comments", response_model=CommentListResponse)
async def list_comments(
    project_id: UUID,
    viewer: OptionalUser,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    comment_service: CommentService = Depends(get_comment_service),
):
    """Top-level comments newest first, each with its replies oldest first."""
    return await comment_service.list_comments(
        project_id,
        viewer_id=viewer["user_id"] if viewer else None,
        limit=limit,
        offset=offset,
    )
