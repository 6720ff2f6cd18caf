"""
XP aggregation over collections.

For a collection C and a requesting user U:

    total_xp(C)     = sum of xp over the distinct materials linked to C
    earned_xp(U, C) = the same sum restricted to materials U has completed

Both figures are computed in SQL over a DISTINCT view of the membership
table, so a redundantly linked material is counted once, and both default to
0 when nothing matches. Completion records for materials that are not (or no
longer) linked to C never reach the sums.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import BigInteger, Select, and_, case, false, func, or_, select

from skillbuilder.catalog.service import get_collection_row
from skillbuilder.database import bounded
from skillbuilder.db.models import Collection, CollectionMaterial, Material, UserCollection, UserMaterial

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass(frozen=True)
class CollectionTotals:
    total_xp: int = 0
    earned_xp: int = 0


@dataclass(frozen=True)
class CollectionProgress:
    """A collection row plus the requesting user's XP figures."""

    collection: Collection
    total_xp: int
    earned_xp: int


@dataclass(frozen=True)
class MaterialProgress:
    material: Material
    completed: bool


@dataclass(frozen=True)
class SearchResult:
    collections: list[CollectionProgress]
    materials: list[Material]


# ---------------------------------------------------------------------------
# Query building blocks
# ---------------------------------------------------------------------------


def _linked(collection_id: str | None = None) -> Any:  # noqa: ANN401
    """Distinct (collection_id, material_id) pairs, optionally for one collection."""
    stmt = select(CollectionMaterial.collection_id, CollectionMaterial.material_id).distinct()
    if collection_id is not None:
        stmt = stmt.where(CollectionMaterial.collection_id == collection_id)
    return stmt.subquery("linked")


def _xp_sums() -> tuple[Any, Any]:
    """SUM expressions for total and earned XP; defaults to 0 over no rows."""
    earned = case((UserMaterial.completed.is_(True), Material.xp), else_=0)
    total_sum = func.coalesce(func.sum(Material.xp, type_=BigInteger), 0)
    earned_sum = func.coalesce(func.sum(earned, type_=BigInteger), 0)
    return total_sum, earned_sum


def _join_progress(stmt: Select, linked: Any, user_id: str) -> Select:  # noqa: ANN401
    return stmt.join(Material, Material.id == linked.c.material_id).outerjoin(
        UserMaterial,
        and_(UserMaterial.material_id == Material.id, UserMaterial.user_id == user_id),
    )


def _collections_with_totals(user_id: str) -> Select:
    """SELECT Collection, total_xp, earned_xp for every collection (outer-joined)."""
    linked = _linked()
    total_sum, earned_sum = _xp_sums()
    totals = (
        _join_progress(
            select(
                linked.c.collection_id.label("collection_id"),
                total_sum.label("total_xp"),
                earned_sum.label("earned_xp"),
            ).select_from(linked),
            linked,
            user_id,
        )
        .group_by(linked.c.collection_id)
        .subquery("totals")
    )
    return (
        select(
            Collection,
            func.coalesce(totals.c.total_xp, 0).label("total_xp"),
            func.coalesce(totals.c.earned_xp, 0).label("earned_xp"),
        )
        .outerjoin(totals, totals.c.collection_id == Collection.id)
        .order_by(Collection.created_at, Collection.id)
    )


async def _fetch_progress(
    db: AsyncSession, stmt: Select, op: str, entity_id: str | None = None
) -> list[CollectionProgress]:
    result = await bounded(db.execute(stmt), op=op, entity_id=entity_id)
    return [
        CollectionProgress(collection=row[0], total_xp=int(row[1]), earned_xp=int(row[2]))
        for row in result.all()
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def collection_totals(db: AsyncSession, collection_id: str, user_id: str) -> CollectionTotals:
    """Total and earned XP for one collection. (0, 0) when nothing is linked."""
    linked = _linked(collection_id)
    total_sum, earned_sum = _xp_sums()
    stmt = _join_progress(select(total_sum, earned_sum).select_from(linked), linked, user_id)
    result = await bounded(db.execute(stmt), op="collection_totals", entity_id=collection_id)
    row = result.one_or_none()
    if row is None:
        return CollectionTotals()
    return CollectionTotals(total_xp=int(row[0] or 0), earned_xp=int(row[1] or 0))


async def get_collection(db: AsyncSession, collection_id: str, user_id: str) -> CollectionProgress:
    """One collection with the requesting user's totals. NotFoundError if absent."""
    collection = await get_collection_row(db, collection_id)
    totals = await collection_totals(db, collection_id, user_id)
    return CollectionProgress(collection=collection, total_xp=totals.total_xp, earned_xp=totals.earned_xp)


async def list_collections_for_user(db: AsyncSession, user_id: str) -> list[CollectionProgress]:
    """Collections on the user's personal list (subscriptions), with totals."""
    stmt = _collections_with_totals(user_id).join(
        UserCollection,
        and_(UserCollection.collection_id == Collection.id, UserCollection.user_id == user_id),
    )
    return await _fetch_progress(db, stmt, op="list_collections_for_user", entity_id=user_id)


async def list_all_collections(db: AsyncSession, user_id: str) -> list[CollectionProgress]:
    """Every collection in the system, with earned_xp personalized to `user_id`."""
    return await _fetch_progress(db, _collections_with_totals(user_id), op="list_all_collections")


async def list_collection_materials(
    db: AsyncSession, collection_id: str, user_id: str
) -> list[MaterialProgress]:
    """Materials linked to a collection, each with the user's completion flag."""
    await get_collection_row(db, collection_id)
    linked = _linked(collection_id)
    stmt = (
        _join_progress(
            select(Material, func.coalesce(UserMaterial.completed, false())).select_from(linked),
            linked,
            user_id,
        )
        .order_by(Material.created_at, Material.id)
    )
    result = await bounded(db.execute(stmt), op="list_collection_materials", entity_id=collection_id)
    return [MaterialProgress(material=row[0], completed=bool(row[1])) for row in result.all()]


async def search(db: AsyncSession, query_text: str, user_id: str) -> SearchResult:
    """Substring search over name and description of collections and materials.

    The search is global: it ignores ownership and subscriptions. Matching is
    case-sensitive and LIKE wildcards in `query_text` match literally.
    """
    collections_stmt = _collections_with_totals(user_id).where(
        or_(
            Collection.name.contains(query_text, autoescape=True),
            Collection.description.contains(query_text, autoescape=True),
        )
    )
    materials_stmt = (
        select(Material)
        .where(
            or_(
                Material.name.contains(query_text, autoescape=True),
                Material.description.contains(query_text, autoescape=True),
            )
        )
        .order_by(Material.created_at, Material.id)
    )

    collections = await _fetch_progress(db, collections_stmt, op="search_collections")
    result = await bounded(db.execute(materials_stmt), op="search_materials")
    materials = list(result.scalars().all())
    logger.debug("search", query=query_text, collections=len(collections), materials=len(materials))
    return SearchResult(collections=collections, materials=materials)
