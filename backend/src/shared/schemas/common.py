"""
Common Schemas

Shared schemas used across the application for consistent API responses.

Schema Types:
=============
- BaseSchema: Base with common config (from_attributes, populate_by_name)
- CamelSchema: BaseSchema that speaks camelCase on the wire
- PaginationParams: page / limit query parameters
- Standard responses: MessageResponse, HealthResponse

Wire Format:
============
Every client-facing payload is camelCase (coverImage, isLiked, createdAt).
CamelSchema generates those aliases from the snake_case field names and
still accepts snake_case input, so services build schemas with Python
names and FastAPI serializes them by alias.

Usage:
======
    from src.shared.schemas.common import CamelSchema

    class UserSummary(CamelSchema):
        id: str
        avatar: Optional[str] = None
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.config.settings import settings


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    - from_attributes: Allow creating from ORM models
    - populate_by_name: Allow field population by name or alias
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class CamelSchema(BaseSchema):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# PAGINATION
# ═══════════════════════════════════════════════════════════════════════════════


class PaginationParams(BaseModel):
    """
    Pagination query parameters.

    Example:
        @router.get("/discover")
        async def discover(pagination: PaginationParams = Depends()):
            ...
    """

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )

    @property
    def offset(self) -> int:
        """Calculate offset for database query."""
        return (self.page - 1) * self.limit


# ═══════════════════════════════════════════════════════════════════════════════
# STANDARD RESPONSES
# ═══════════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Simple message response for success confirmations."""

    message: str
    success: bool = True


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = "healthy"
    service: str = "folio"
    version: str = settings.APP_VERSION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: Optional[dict[str, bool]] = None
