"""Progress API: completion toggles and catalog search."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillbuilder.auth.session import get_current_user_id
from skillbuilder.catalog.router import collection_response
from skillbuilder.catalog.schemas import MaterialResponse
from skillbuilder.database import get_session
from skillbuilder.progress.aggregator import search
from skillbuilder.progress.completion import get_completion, set_completion
from skillbuilder.progress.schemas import CompletionResponse, SearchRequest, SearchResponse

router = APIRouter(prefix="/api/v1", tags=["Progress"])


@router.get("/material/{material_id}/completed", response_model=CompletionResponse)
async def completion_status(
    material_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> CompletionResponse:
    """The caller's completion flag; false when never set."""
    completed = await get_completion(db, user_id, material_id)
    return CompletionResponse(material_id=material_id, completed=completed)


@router.post("/material/{material_id}/completed", response_model=CompletionResponse)
async def mark_completed(
    material_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> CompletionResponse:
    await set_completion(db, user_id, material_id, True)  # noqa: FBT003
    return CompletionResponse(material_id=material_id, completed=True)


@router.post("/material/{material_id}/incomplete", response_model=CompletionResponse)
async def mark_incomplete(
    material_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> CompletionResponse:
    await set_completion(db, user_id, material_id, False)  # noqa: FBT003
    return CompletionResponse(material_id=material_id, completed=False)


@router.post("/search", response_model=SearchResponse)
async def search_catalog(
    body: SearchRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> SearchResponse:
    """Search every collection and material, regardless of ownership.

    Collections carry the caller's XP figures; materials are returned as-is.
    """
    result = await search(db, body.query, user_id)
    return SearchResponse(
        collections=[collection_response(p) for p in result.collections],
        materials=[MaterialResponse.model_validate(m) for m in result.materials],
    )
