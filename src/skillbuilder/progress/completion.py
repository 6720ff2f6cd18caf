"""Per-user completion state for materials.

Rules:
- At most one completion record exists per (user, material)
- Setting a flag is a single upsert, so concurrent toggles never duplicate rows
- The last committed write wins
- The material itself is not looked up; a record may outlive its material
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from skillbuilder.database import bounded, insert_for
from skillbuilder.db.models import UserMaterial
from skillbuilder.errors import BadRequestError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def set_completion(db: AsyncSession, user_id: str, material_id: str, completed: bool) -> None:  # noqa: FBT001
    """Record whether `user_id` has completed `material_id`. Idempotent."""
    if not material_id:
        msg = "Material id is required"
        raise BadRequestError(msg)

    now = datetime.now(timezone.utc)
    stmt = insert_for(db, UserMaterial).values(
        user_id=user_id,
        material_id=material_id,
        completed=completed,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "material_id"],
        set_={
            "completed": stmt.excluded.completed,
            "updated_at": stmt.excluded.updated_at,
        },
    )

    async def _upsert() -> None:
        await db.execute(stmt)
        await db.commit()

    await bounded(_upsert(), op="set_completion", entity_id=material_id)
    logger.info("completion_set", user_id=user_id, material_id=material_id, completed=completed)


async def get_completion(db: AsyncSession, user_id: str, material_id: str) -> bool:
    """Current completion flag; False when no record exists."""
    result = await bounded(
        db.execute(
            select(UserMaterial.completed).where(
                UserMaterial.user_id == user_id,
                UserMaterial.material_id == material_id,
            )
        ),
        op="get_completion",
        entity_id=material_id,
    )
    return bool(result.scalar_one_or_none())
