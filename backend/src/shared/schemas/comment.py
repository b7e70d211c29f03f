"""
Comment Schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from src.shared.schemas.common import CamelSchema
from src.shared.schemas.project import UserSummary


class CommentItem(CamelSchema):
    """A comment or reply with its author and the viewer's like state."""

    id: UUID
    content: str
    tags: list[str] = Field(default_factory=list)
    project_id: UUID
    parent_id: Optional[UUID] = None
    likes: int = 0
    reply_count: int = 0
    created_at: datetime
    updated_at: datetime
    is_liked: bool = False
    user: UserSummary
    replies: list["CommentItem"] = Field(default_factory=list)


class CommentListResponse(CamelSchema):
    comments: list[CommentItem]
    total: int
    has_more: bool


class CreateCommentRequest(CamelSchema):
    """
    Request to post a comment.

    project_id or parent_id is required. A reply may give only parent_id;
    the project is taken from the parent.
    """

    content: str = Field(max_length=2000)
    project_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def target_required(self) -> "CreateCommentRequest":
        if self.project_id is None and self.parent_id is None:
            raise ValueError("projectId or parentId is required")
        return self


class UpdateCommentRequest(CamelSchema):
    content: str = Field(max_length=2000)
    tags: Optional[list[str]] = None


class CommentLikeResponse(CamelSchema):
    liked: bool
    likes: int
