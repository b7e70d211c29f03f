"""
Collection Schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.shared.models.collection import COLLECTION_NAME_MAX_LENGTH
from src.shared.schemas.common import CamelSchema
from src.shared.schemas.project import ProjectFeedItem


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Collection name is required")
    if len(value) > COLLECTION_NAME_MAX_LENGTH:
        raise ValueError(
            f"Collection name must be at most {COLLECTION_NAME_MAX_LENGTH} characters"
        )
    return value


class CollectionResponse(CamelSchema):
    id: UUID
    name: str
    description: Optional[str] = None
    is_public: bool
    cover_image_url: Optional[str] = None
    project_count: int
    user_id: str
    created_at: datetime
    updated_at: datetime


class CollectionDetailResponse(CollectionResponse):
    projects: list[ProjectFeedItem] = Field(default_factory=list)


class CreateCollectionRequest(CamelSchema):
    name: str
    description: Optional[str] = None
    is_public: bool = True

    normalize_name = field_validator("name")(_clean_name)


class UpdateCollectionRequest(CamelSchema):
    name: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None

    normalize_name = field_validator("name")(_clean_name)


class CollectionProjectRequest(CamelSchema):
    project_id: UUID
