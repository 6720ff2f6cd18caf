"""Password hashing (argon2id) and strength rules for account registration."""

from __future__ import annotations

import argon2

from skillbuilder.config import get_settings
from skillbuilder.errors import BadRequestError

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,
)

_CHARACTER_RULES = (
    (str.isupper, "an uppercase letter"),
    (str.islower, "a lowercase letter"),
    (str.isdigit, "a digit"),
)


class WeakPasswordError(BadRequestError):
    """Raised when a password does not meet strength requirements."""

    code = "weak_password"


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if the password matches. Never raises on mismatch."""
    try:
        return _hasher.verify(password_hash, password)
    except (argon2.exceptions.VerifyMismatchError, argon2.exceptions.InvalidHashError):
        return False


def validate_password_strength(password: str) -> None:
    """
    Reject passwords that are blank, outside the configured length bounds, or
    missing an uppercase letter, a lowercase letter or a digit.

    Raises:
        WeakPasswordError: naming the first rule the password breaks.
    """
    settings = get_settings()
    if not password or not password.strip():
        msg = "Password cannot be empty"
        raise WeakPasswordError(msg)
    if len(password) < settings.password_min_length:
        msg = f"Password must be at least {settings.password_min_length} characters"
        raise WeakPasswordError(msg)
    if len(password) > settings.password_max_length:
        msg = f"Password must not exceed {settings.password_max_length} characters"
        raise WeakPasswordError(msg)
    for predicate, label in _CHARACTER_RULES:
        if not any(predicate(c) for c in password):
            msg = f"Password must contain {label}"
            raise WeakPasswordError(msg)
