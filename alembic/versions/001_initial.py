"""Initial schema: users, collections, materials and progress.

Creates users, material_types, collections, materials,
collection_materials, user_collections and user_materials, and seeds the
material type reference list.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op
from skillbuilder.catalog.seed import MATERIAL_TYPE_SEED_DATA

revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("login", sa.String(128), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        *_timestamps(),
    )

    # --- material_types ---
    material_types = op.create_table(
        "material_types",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False, unique=True),
        sa.Column("characteristic", sa.Text(), server_default="", nullable=False),
        sa.Column("xp", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
    )

    # --- collections ---
    op.create_table(
        "collections",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_collections_user_id", "collections", ["user_id"])

    # --- materials ---
    op.create_table(
        "materials",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column(
            "type_id",
            sa.String(36),
            sa.ForeignKey("material_types.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("xp", sa.Integer(), server_default="0", nullable=False),
        sa.Column("link", sa.Text(), server_default="", nullable=False),
        *_timestamps(),
        sa.CheckConstraint("xp >= 0", name="ck_materials_xp_non_negative"),
    )
    op.create_index("ix_materials_user_id", "materials", ["user_id"])

    # --- collection_materials ---
    op.create_table(
        "collection_materials",
        sa.Column(
            "collection_id",
            sa.String(36),
            sa.ForeignKey("collections.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "material_id",
            sa.String(36),
            sa.ForeignKey("materials.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_collection_materials_material_id", "collection_materials", ["material_id"])

    # --- user_collections ---
    op.create_table(
        "user_collections",
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "collection_id",
            sa.String(36),
            sa.ForeignKey("collections.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_user_collections_collection_id", "user_collections", ["collection_id"])

    # --- user_materials (no FK on material_id) ---
    op.create_table(
        "user_materials",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_id", sa.String(36), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "material_id", name="uq_user_materials_user_material"),
    )
    op.create_index("ix_user_materials_material_id", "user_materials", ["material_id"])

    op.bulk_insert(material_types, MATERIAL_TYPE_SEED_DATA)


def downgrade() -> None:
    op.drop_index("ix_user_materials_material_id", table_name="user_materials")
    op.drop_table("user_materials")
    op.drop_index("ix_user_collections_collection_id", table_name="user_collections")
    op.drop_table("user_collections")
    op.drop_index("ix_collection_materials_material_id", table_name="collection_materials")
    op.drop_table("collection_materials")
    op.drop_index("ix_materials_user_id", table_name="materials")
    op.drop_table("materials")
    op.drop_index("ix_collections_user_id", table_name="collections")
    op.drop_table("collections")
    op.drop_table("material_types")
    op.drop_table("users")
