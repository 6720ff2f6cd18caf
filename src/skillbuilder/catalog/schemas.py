"""Request/response schemas for collection and material endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from skillbuilder.db.models import MAX_XP

# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class CollectionCreate(BaseModel):
    """The owner is always the authenticated caller, never a payload field."""

    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(default="", max_length=10_000)


class CollectionUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(default="", max_length=10_000)


class CollectionResponse(BaseModel):
    """A collection with the requesting user's XP figures."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    total_xp: int = 0
    earned_xp: int = 0
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Materials
# ---------------------------------------------------------------------------


class MaterialCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(default="", max_length=10_000)
    type_id: str | None = None
    xp: int = Field(default=0, ge=0, le=MAX_XP)
    link: str = Field(default="", max_length=2048)
    collection_id: str | None = None


class MaterialUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(default="", max_length=10_000)
    type_id: str | None = None
    xp: int = Field(default=0, ge=0, le=MAX_XP)
    link: str = Field(default="", max_length=2048)


class MaterialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    type_id: str | None
    xp: int
    link: str
    created_at: datetime
    updated_at: datetime


class MaterialWithProgressResponse(MaterialResponse):
    completed: bool = False


class MaterialTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    characteristic: str
    xp: int
