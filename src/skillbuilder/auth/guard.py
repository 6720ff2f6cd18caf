"""Ownership guard for mutations of collections and materials."""

from __future__ import annotations

import enum

import structlog

from skillbuilder.errors import ForbiddenError

logger = structlog.get_logger()


class Decision(str, enum.Enum):
    ALLOW = "allow"
    FORBID = "forbid"


def authorize_mutation(resource_owner_id: str, authenticated_user_id: str) -> Decision:
    """Allow iff the authenticated user is the recorded owner."""
    if resource_owner_id and resource_owner_id == authenticated_user_id:
        return Decision.ALLOW
    return Decision.FORBID


def ensure_can_mutate(
    resource_owner_id: str,
    authenticated_user_id: str,
    *,
    resource: str,
    resource_id: str,
) -> None:
    """Raise ForbiddenError unless the authenticated user owns the resource."""
    if authorize_mutation(resource_owner_id, authenticated_user_id) is Decision.FORBID:
        logger.warning(
            "ownership_denied",
            resource=resource,
            resource_id=resource_id,
            user_id=authenticated_user_id,
        )
        msg = f"You do not own this {resource}"
        raise ForbiddenError(msg)
