"""
Account business logic: registration and credential checks.

Session tokens are issued by the router through the SessionAuthenticator;
nothing here touches cookies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from skillbuilder.auth.password import hash_password, validate_password_strength, verify_password
from skillbuilder.database import bounded
from skillbuilder.db.models import User
from skillbuilder.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by ID."""
    return await bounded(db.get(User, user_id), op="get_user", entity_id=user_id)


async def get_user_by_login(db: AsyncSession, login: str) -> User | None:
    """Fetch a user by login (exact match)."""
    result = await bounded(
        db.execute(select(User).where(User.login == login)),
        op="get_user_by_login",
        entity_id=login,
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------------


async def register_user(db: AsyncSession, login: str, password: str) -> User:
    """
    Register a new user with login + password.

    Raises:
        BadRequestError: blank login or weak password.
        ConflictError: the login is already taken.
    """
    login = login.strip()
    if not login:
        msg = "Login cannot be empty"
        raise BadRequestError(msg)
    validate_password_strength(password)

    if await get_user_by_login(db, login) is not None:
        msg = "Login already registered"
        raise ConflictError(msg)

    user = User(login=login, password_hash=hash_password(password))
    db.add(user)
    await bounded(db.commit(), op="register_user", entity_id=login)
    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, login: str, password: str) -> User:
    """
    Check login credentials.

    Raises:
        NotFoundError: no user with that login.
        UnauthorizedError: the password does not match.
    """
    user = await get_user_by_login(db, login.strip())
    if user is None:
        logger.info("login_failed", reason="unknown_login")
        raise NotFoundError("User")
    if not verify_password(password, user.password_hash):
        logger.info("login_failed", reason="bad_password", user_id=user.id)
        msg = "Password is not correct"
        raise UnauthorizedError(msg)
    logger.info("user_logged_in", user_id=user.id)
    return user
