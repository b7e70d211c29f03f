"""
Comment Handler

    POST   /comments                 comment or reply (auth)
    PUT    /comments/{id}            edit, author only
    DELETE /comments/{id}            delete, author only
    POST   /comments/{id}/like       toggle like (auth)

Listing lives under /projects/{id}/comments.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.dependencies import CurrentUser
from src.api.dependencies.services import get_comment_service, get_social_service
from src.shared.schemas.comment import (
    CommentItem,
    CommentLikeResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from src.shared.schemas.common import MessageResponse
from src.shared.services.comment_service import CommentService
from src.shared.services.social_service import SocialService


router = APIRouter()


@router.post(
    "",
    response_model=CommentItem,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    request: CreateCommentRequest,
    current_user: CurrentUser,
    comment_service: CommentService = Depends(get_comment_service),
):
    """
    Post a comment on a project, or a reply to a comment.

    A reply to a reply is attached to the root comment.
    """
    return await comment_service.create_comment(current_user["user_id"], request)


@router.put("/{comment_id}", response_model=CommentItem)
async def update_comment(
    comment_id: UUID,
    request: UpdateCommentRequest,
    current_user: CurrentUser,
    comment_service: CommentService = Depends(get_comment_service),
):
    return await comment_service.update_comment(current_user["user_id"], comment_id, request)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: UUID,
    current_user: CurrentUser,
    comment_service: CommentService = Depends(get_comment_service),
):
    await comment_service.delete_comment(current_user["user_id"], comment_id)
    return MessageResponse(message="Comment deleted")


@router.post("/{comment_id}/like", response_model=CommentLikeResponse)
async def toggle_comment_like(
    comment_id: UUID,
    current_user: CurrentUser,
    social_service: SocialService = Depends(get_social_service),
):
    liked, likes = await social_service.toggle_comment_like(current_user["user_id"], comment_id)
    return CommentLikeResponse(liked=liked, likes=likes)
