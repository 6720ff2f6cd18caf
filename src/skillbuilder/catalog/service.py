"""Collection and material business logic.

Rules:
- Any authenticated user may read any collection or material
- Only the owner may update or delete a collection or material
- Only the collection owner may attach or detach materials
- Creating a collection subscribes its owner to it
- Subscriptions are independent of ownership
- Owner ids are never taken from request payloads
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select

from skillbuilder.auth.guard import ensure_can_mutate
from skillbuilder.database import bounded, insert_for
from skillbuilder.db.models import (
    MAX_XP,
    Collection,
    CollectionMaterial,
    Material,
    MaterialType,
    UserCollection,
)
from skillbuilder.errors import BadRequestError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_collection_row(db: AsyncSession, collection_id: str) -> Collection:
    """Fetch a collection or raise NotFoundError."""
    collection = await bounded(db.get(Collection, collection_id), op="get_collection", entity_id=collection_id)
    if collection is None:
        raise NotFoundError("Collection", collection_id)
    return collection


async def get_material(db: AsyncSession, material_id: str) -> Material:
    """Fetch a material or raise NotFoundError."""
    material = await bounded(db.get(Material, material_id), op="get_material", entity_id=material_id)
    if material is None:
        raise NotFoundError("Material", material_id)
    return material


async def list_material_types(db: AsyncSession) -> list[MaterialType]:
    result = await bounded(
        db.execute(select(MaterialType).order_by(MaterialType.name)),
        op="list_material_types",
    )
    return list(result.scalars().all())


async def _check_material_type(db: AsyncSession, type_id: str | None) -> None:
    if type_id is None:
        return
    found = await db.get(MaterialType, type_id)
    if found is None:
        msg = f"Unknown material type {type_id}"
        raise BadRequestError(msg)


def _check_xp(xp: int) -> None:
    if not 0 <= xp <= MAX_XP:
        msg = f"xp must be an integer between 0 and {MAX_XP}"
        raise BadRequestError(msg)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


async def create_collection(db: AsyncSession, user_id: str, name: str, description: str = "") -> Collection:
    """Create a collection owned by `user_id` and add it to the owner's list."""

    async def _create() -> Collection:
        collection = Collection(user_id=user_id, name=name, description=description)
        db.add(collection)
        await db.flush()
        await db.execute(
            insert_for(db, UserCollection)
            .values(user_id=user_id, collection_id=collection.id)
            .on_conflict_do_nothing(index_elements=["user_id", "collection_id"])
        )
        await db.commit()
        return collection

    collection = await bounded(_create(), op="create_collection")
    logger.info("collection_created", collection_id=collection.id, user_id=user_id)
    return collection


async def update_collection(
    db: AsyncSession,
    user_id: str,
    collection_id: str,
    *,
    name: str,
    description: str,
) -> Collection:
    """Rename / re-describe a collection. Owner only."""

    async def _update() -> Collection:
        collection = await get_collection_row(db, collection_id)
        ensure_can_mutate(collection.user_id, user_id, resource="collection", resource_id=collection_id)
        collection.name = name
        collection.description = description
        await db.commit()
        return collection

    collection = await bounded(_update(), op="update_collection", entity_id=collection_id)
    logger.info("collection_updated", collection_id=collection_id, user_id=user_id)
    return collection


async def delete_collection(db: AsyncSession, user_id: str, collection_id: str) -> None:
    """Delete a collection. Owner only. Memberships and subscriptions cascade."""

    async def _delete() -> None:
        collection = await get_collection_row(db, collection_id)
        ensure_can_mutate(collection.user_id, user_id, resource="collection", resource_id=collection_id)
        await db.delete(collection)
        await db.commit()

    await bounded(_delete(), op="delete_collection", entity_id=collection_id)
    logger.info("collection_deleted", collection_id=collection_id, user_id=user_id)


async def subscribe(db: AsyncSession, user_id: str, collection_id: str) -> None:
    """Add a collection to the user's personal list. Idempotent."""

    async def _subscribe() -> None:
        await get_collection_row(db, collection_id)
        await db.execute(
            insert_for(db, UserCollection)
            .values(user_id=user_id, collection_id=collection_id)
            .on_conflict_do_nothing(index_elements=["user_id", "collection_id"])
        )
        await db.commit()

    await bounded(_subscribe(), op="subscribe", entity_id=collection_id)
    logger.info("collection_subscribed", collection_id=collection_id, user_id=user_id)


async def unsubscribe(db: AsyncSession, user_id: str, collection_id: str) -> None:
    """Remove a collection from the user's personal list."""

    async def _unsubscribe() -> None:
        await db.execute(
            delete(UserCollection).where(
                UserCollection.user_id == user_id,
                UserCollection.collection_id == collection_id,
            )
        )
        await db.commit()

    await bounded(_unsubscribe(), op="unsubscribe", entity_id=collection_id)
    logger.info("collection_unsubscribed", collection_id=collection_id, user_id=user_id)


# ---------------------------------------------------------------------------
# Materials
# ---------------------------------------------------------------------------


async def create_material(
    db: AsyncSession,
    user_id: str,
    *,
    name: str,
    description: str = "",
    type_id: str | None = None,
    xp: int = 0,
    link: str = "",
    collection_id: str | None = None,
) -> Material:
    """Create a material, optionally attaching it to a collection the user owns.

    The ownership check on the target collection runs before anything is
    written; creation and attachment commit together.
    """
    _check_xp(xp)

    async def _create() -> Material:
        if collection_id is not None:
            collection = await get_collection_row(db, collection_id)
            ensure_can_mutate(collection.user_id, user_id, resource="collection", resource_id=collection_id)
        await _check_material_type(db, type_id)

        material = Material(
            user_id=user_id,
            name=name,
            description=description,
            type_id=type_id,
            xp=xp,
            link=link,
        )
        db.add(material)
        await db.flush()
        if collection_id is not None:
            await _link(db, collection_id, material.id)
        await db.commit()
        return material

    material = await bounded(_create(), op="create_material", entity_id=collection_id)
    logger.info(
        "material_created",
        material_id=material.id,
        collection_id=collection_id,
        user_id=user_id,
        xp=xp,
    )
    return material


async def update_material(
    db: AsyncSession,
    user_id: str,
    material_id: str,
    *,
    name: str,
    description: str,
    type_id: str | None,
    xp: int,
    link: str,
) -> Material:
    """Replace a material's editable fields. Owner only."""
    _check_xp(xp)

    async def _update() -> Material:
        material = await get_material(db, material_id)
        ensure_can_mutate(material.user_id, user_id, resource="material", resource_id=material_id)
        await _check_material_type(db, type_id)
        material.name = name
        material.description = description
        material.type_id = type_id
        material.xp = xp
        material.link = link
        await db.commit()
        return material

    material = await bounded(_update(), op="update_material", entity_id=material_id)
    logger.info("material_updated", material_id=material_id, user_id=user_id)
    return material


async def delete_material(db: AsyncSession, user_id: str, material_id: str) -> None:
    """Delete a material. Owner only. Its memberships cascade; completion records stay."""

    async def _delete() -> None:
        material = await get_material(db, material_id)
        ensure_can_mutate(material.user_id, user_id, resource="material", resource_id=material_id)
        await db.delete(material)
        await db.commit()

    await bounded(_delete(), op="delete_material", entity_id=material_id)
    logger.info("material_deleted", material_id=material_id, user_id=user_id)


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


async def _link(db: AsyncSession, collection_id: str, material_id: str) -> None:
    await db.execute(
        insert_for(db, CollectionMaterial)
        .values(collection_id=collection_id, material_id=material_id)
        .on_conflict_do_nothing(index_elements=["collection_id", "material_id"])
    )


async def attach_material(db: AsyncSession, user_id: str, collection_id: str, material_id: str) -> None:
    """Link an existing material to a collection the user owns. Idempotent."""

    async def _attach() -> None:
        collection = await get_collection_row(db, collection_id)
        ensure_can_mutate(collection.user_id, user_id, resource="collection", resource_id=collection_id)
        await get_material(db, material_id)
        await _link(db, collection_id, material_id)
        await db.commit()

    await bounded(_attach(), op="attach_material", entity_id=f"{collection_id}/{material_id}")
    logger.info("material_attached", collection_id=collection_id, material_id=material_id, user_id=user_id)


async def detach_material(db: AsyncSession, user_id: str, collection_id: str, material_id: str) -> None:
    """Unlink a material from a collection the user owns."""

    async def _detach() -> None:
        collection = await get_collection_row(db, collection_id)
        ensure_can_mutate(collection.user_id, user_id, resource="collection", resource_id=collection_id)
        await db.execute(
            delete(CollectionMaterial).where(
                CollectionMaterial.collection_id == collection_id,
                CollectionMaterial.material_id == material_id,
            )
        )
        await db.commit()

    await bounded(_detach(), op="detach_material", entity_id=f"{collection_id}/{material_id}")
    logger.info("material_detached", collection_id=collection_id, material_id=material_id, user_id=user_id)
