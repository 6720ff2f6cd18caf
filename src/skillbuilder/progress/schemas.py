"""Request/response schemas for completion and search endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from skillbuilder.catalog.schemas import CollectionResponse, MaterialResponse


class CompletionResponse(BaseModel):
    material_id: str
    completed: bool


class SearchRequest(BaseModel):
    """Substring to look for in names and descriptions. Case-sensitive."""

    query: str = Field(..., min_length=1, max_length=256)


class SearchResponse(BaseModel):
    collections: list[CollectionResponse]
    materials: list[MaterialResponse]
