"""Database layer: SQLAlchemy models."""

from skillbuilder.db.base import Base
from skillbuilder.db.models import (
    Collection,
    CollectionMaterial,
    Material,
    MaterialType,
    User,
    UserCollection,
    UserMaterial,
)

__all__ = [
    "Base",
    "Collection",
    "CollectionMaterial",
    "Material",
    "MaterialType",
    "User",
    "UserCollection",
    "UserMaterial",
]
