"""Material type reference list, upserted at startup and by the initial migration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from skillbuilder.database import insert_for
from skillbuilder.db.models import MaterialType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

MATERIAL_TYPE_SEED_DATA: list[dict] = [
    {
        "id": "7f1d1a52-5d0b-4a53-9a3e-0c8f6f2a0001",
        "name": "article",
        "characteristic": "Short written piece, read in one sitting",
        "xp": 10,
    },
    {
        "id": "7f1d1a52-5d0b-4a53-9a3e-0c8f6f2a0002",
        "name": "video",
        "characteristic": "Recorded talk or tutorial",
        "xp": 15,
    },
    {
        "id": "7f1d1a52-5d0b-4a53-9a3e-0c8f6f2a0003",
        "name": "book",
        "characteristic": "Long-form reading",
        "xp": 100,
    },
    {
        "id": "7f1d1a52-5d0b-4a53-9a3e-0c8f6f2a0004",
        "name": "course",
        "characteristic": "Structured multi-lesson course",
        "xp": 200,
    },
    {
        "id": "7f1d1a52-5d0b-4a53-9a3e-0c8f6f2a0005",
        "name": "practice",
        "characteristic": "Hands-on exercise or project",
        "xp": 50,
    },
]


async def seed_material_types(db: AsyncSession) -> int:
    """Upsert the material type list by id. Returns the number of rows written."""
    seeded = 0
    for type_data in MATERIAL_TYPE_SEED_DATA:
        stmt = insert_for(db, MaterialType).values(**type_data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "name": stmt.excluded.name,
                "characteristic": stmt.excluded.characteristic,
                "xp": stmt.excluded.xp,
            },
        )
        await db.execute(stmt)
        seeded += 1

    await db.commit()
    logger.info("material_types_seeded", count=seeded)
    return seeded
