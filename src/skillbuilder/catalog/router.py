"""Collections and materials API: /api/v1/collection*, /api/v1/material*.

Every route requires a session. Mutations are checked against ownership in
the service layer; reads are open to any authenticated user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from skillbuilder.auth.session import get_current_user_id
from skillbuilder.catalog import service
from skillbuilder.catalog.schemas import (
    CollectionCreate,
    CollectionResponse,
    CollectionUpdate,
    MaterialCreate,
    MaterialResponse,
    MaterialTypeResponse,
    MaterialUpdate,
    MaterialWithProgressResponse,
)
from skillbuilder.database import get_session
from skillbuilder.progress import aggregator
from skillbuilder.progress.aggregator import CollectionProgress

router = APIRouter(prefix="/api/v1", tags=["Catalog"])


def collection_response(progress: CollectionProgress) -> CollectionResponse:
    c = progress.collection
    return CollectionResponse(
        id=c.id,
        user_id=c.user_id,
        name=c.name,
        description=c.description,
        total_xp=progress.total_xp,
        earned_xp=progress.earned_xp,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


# ── Collections ──


@router.post("/collection", response_model=CollectionResponse, status_code=201)
async def create_collection(
    body: CollectionCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> CollectionResponse:
    """Create a collection owned by the caller."""
    collection = await service.create_collection(db, user_id, body.name, body.description)
    return collection_response(CollectionProgress(collection=collection, total_xp=0, earned_xp=0))


@router.get("/collections", response_model=list[CollectionResponse])
async def list_collections(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[CollectionResponse]:
    """All collections, with the caller's earned XP."""
    rows = await aggregator.list_all_collections(db, user_id)
    return [collection_response(p) for p in rows]


@router.get("/collections/user", response_model=list[CollectionResponse])
async def list_my_collections(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[CollectionResponse]:
    """Collections on the caller's personal list."""
    rows = await aggregator.list_collections_for_user(db, user_id)
    return [collection_response(p) for p in rows]


@router.get("/collection/{collection_id}", response_model=CollectionResponse)
async def get_collection(
    collection_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> CollectionResponse:
    progress = await aggregator.get_collection(db, collection_id, user_id)
    return collection_response(progress)


@router.put("/collection/{collection_id}", response_model=CollectionResponse)
async def update_collection(
    collection_id: str,
    body: CollectionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> CollectionResponse:
    await service.update_collection(db, user_id, collection_id, name=body.name, description=body.description)
    progress = await aggregator.get_collection(db, collection_id, user_id)
    return collection_response(progress)


@router.delete("/collection/{collection_id}", status_code=204)
async def delete_collection(
    collection_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> Response:
    await service.delete_collection(db, user_id, collection_id)
    return Response(status_code=204)


@router.post("/collection/{collection_id}/user", status_code=204)
async def subscribe(
    collection_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> Response:
    """Add the collection to the caller's personal list."""
    await service.subscribe(db, user_id, collection_id)
    return Response(status_code=204)


@router.delete("/collection/{collection_id}/user", status_code=204)
async def unsubscribe(
    collection_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> Response:
    await service.unsubscribe(db, user_id, collection_id)
    return Response(status_code=204)


@router.get("/collection/{collection_id}/materials", response_model=list[MaterialWithProgressResponse])
async def list_collection_materials(
    collection_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[MaterialWithProgressResponse]:
    """Materials in a collection, each flagged with the caller's completion."""
    rows = await aggregator.list_collection_materials(db, collection_id, user_id)
    return [
        MaterialWithProgressResponse(
            **MaterialResponse.model_validate(p.material).model_dump(),
            completed=p.completed,
        )
        for p in rows
    ]


@router.post("/collection/{collection_id}/material/{material_id}", status_code=204)
async def attach_material(
    collection_id: str,
    material_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> Response:
    await service.attach_material(db, user_id, collection_id, material_id)
    return Response(status_code=204)


@router.delete("/collection/{collection_id}/material/{material_id}", status_code=204)
async def detach_material(
    collection_id: str,
    material_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> Response:
    await service.detach_material(db, user_id, collection_id, material_id)
    return Response(status_code=204)


# ── Materials ──


@router.post("/material", response_model=MaterialResponse, status_code=201)
async def create_material(
    body: MaterialCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> MaterialResponse:
    """Create a material, attaching it to `collection_id` when given."""
    material = await service.create_material(
        db,
        user_id,
        name=body.name,
        description=body.description,
        type_id=body.type_id,
        xp=body.xp,
        link=body.link,
        collection_id=body.collection_id,
    )
    return MaterialResponse.model_validate(material)


# Registered before /material/{material_id} so "type" is not read as an id.
@router.get("/material/type", response_model=list[MaterialTypeResponse])
async def list_material_types(
    _user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[MaterialTypeResponse]:
    types = await service.list_material_types(db)
    return [MaterialTypeResponse.model_validate(t) for t in types]


@router.get("/material/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: str,
    _user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> MaterialResponse:
    material = await service.get_material(db, material_id)
    return MaterialResponse.model_validate(material)


@router.put("/material/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: str,
    body: MaterialUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> MaterialResponse:
    material = await service.update_material(
        db,
        user_id,
        material_id,
        name=body.name,
        description=body.description,
        type_id=body.type_id,
        xp=body.xp,
        link=body.link,
    )
    return MaterialResponse.model_validate(material)


@router.delete("/material/{material_id}", status_code=204)
async def delete_material(
    material_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> Response:
    await service.delete_material(db, user_id, material_id)
    return Response(status_code=204)
