"""
Follow Handler

    POST   /follows                    {"followingId": ...}
    DELETE /follows?followingId=...
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import CurrentUser
from src.api.dependencies.services import get_social_service
from src.shared.schemas.user import FollowRequest, FollowResponse
from src.shared.services.social_service import SocialService


router = APIRouter()


@router.post("", response_model=FollowResponse)
async def follow_user(
    request: FollowRequest,
    current_user: CurrentUser,
    social_service: SocialService = Depends(get_social_service),
):
    """Follow a user. 400 for yourself, 404 unknown user, 409 already following."""
    followers = await social_service.follow(current_user["user_id"], request.following_id)
    return FollowResponse(following=True, followers=followers)


@router.delete("", response_model=FollowResponse)
async def unfollow_user(
    current_user: CurrentUser,
    following_id: str = Query(..., alias="followingId"),
    social_service: SocialService = Depends(get_social_service),
):
    followers = await social_service.unfollow(current_user["user_id"], following_id)
    return FollowResponse(following=False, followers=followers)
