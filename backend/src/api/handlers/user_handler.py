"""
User Handler

    PUT /users/me                     create or update the caller's profile
    GET /users/{username}             profile page with stats and projects
    GET /mentions/suggestions?q=      @mention autocomplete (auth)
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import CurrentUser, OptionalUser
from src.api.dependencies.services import get_user_service
from src.shared.schemas.user import (
    MentionSuggestionsResponse,
    UpdateProfileRequest,
    UserProfile,
    UserProfileResponse,
)
from src.shared.services.user_service import UserService


router = APIRouter()
mentions_router = APIRouter()


@router.put("/me", response_model=UserProfile)
async def upsert_profile(
    request: UpdateProfileRequest,
    current_user: CurrentUser,
    user_service: UserService = Depends(get_user_service),
):
    """
    Create or update the profile row for the authenticated identity.

    409 if the username belongs to someone else.
    """
    return await user_service.upsert_profile(current_user["user_id"], request)


@router.get("/{username}", response_model=UserProfileResponse)
async def get_profile(
    username: str,
    viewer: OptionalUser,
    user_service: UserService = Depends(get_user_service),
):
    return await user_service.get_profile(
        username, viewer_id=viewer["user_id"] if viewer else None
    )


@mentions_router.get("/suggestions", response_model=MentionSuggestionsResponse)
async def mention_suggestions(
    current_user: CurrentUser,
    q: str = Query("", description="Partial username or name"),
    limit: int = Query(5, ge=1),
    user_service: UserService = Depends(get_user_service),
):
    """At most 20 suggestions; the caller is never suggested."""
    suggestions = await user_service.mention_suggestions(q, current_user["user_id"], limit)
    return MentionSuggestionsResponse(suggestions=suggestions)
