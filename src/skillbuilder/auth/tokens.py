"""
HS256 session token codec.

A token is a compact JWT carrying the user id (`sub`) and an expiry (`exp`),
signed with the server's secret key. Verification needs nothing but the key:
there is no server-side session store.
"""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from skillbuilder.config import Settings
from skillbuilder.errors import AuthError, AuthFailure


def _is_canonical_segment(segment: str) -> bool:
    """Return True if `segment` is the canonical unpadded base64url form of its bytes.

    Decoders ignore the spare low bits of the final character, so two texts
    can decode to the same signature. Only the canonical text is accepted.
    """
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (ValueError, TypeError):
        return False
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii") == segment


class TokenCodec:
    """Issue and verify session tokens with a fixed secret key.

    Instances are immutable after construction and safe to share across
    concurrent requests.
    """

    __slots__ = ("_secret_key", "_algorithm", "_lifetime")

    def __init__(self, secret_key: str, *, lifetime: timedelta, algorithm: str = "HS256") -> None:
        if not secret_key:
            msg = "Session secret key must not be empty"
            raise ValueError(msg)
        if not algorithm.startswith("HS"):
            msg = f"Session tokens require an HMAC algorithm, got {algorithm!r}"
            raise ValueError(msg)
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenCodec:
        return cls(
            settings.secret_key,
            lifetime=timedelta(minutes=settings.token_expire_minutes),
            algorithm=settings.token_algorithm,
        )

    @property
    def lifetime(self) -> timedelta:
        """How long an issued token stays valid."""
        return self._lifetime

    def issue(self, user_id: str, *, now: datetime | None = None) -> str:
        """
        Create a signed token for `user_id`.

        Args:
            user_id: The user's id.
            now: Issue time (defaults to the current UTC time).

        Returns:
            Encoded token string, safe to store in a cookie.
        """
        if not user_id:
            msg = "user_id must not be empty"
            raise ValueError(msg)
        issued_at = now or datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Verify a token and return the user id it carries.

        Raises:
            AuthError: with reason MALFORMED, INVALID_SIGNATURE or EXPIRED.
        """
        if not token or token.count(".") != 2:
            raise AuthError(AuthFailure.MALFORMED)
        if not _is_canonical_segment(token.rsplit(".", 1)[1]):
            raise AuthError(AuthFailure.MALFORMED)

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError(AuthFailure.EXPIRED) from None
        except jwt.InvalidSignatureError:
            raise AuthError(AuthFailure.INVALID_SIGNATURE) from None
        except jwt.InvalidTokenError:
            raise AuthError(AuthFailure.MALFORMED) from None

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise AuthError(AuthFailure.MALFORMED)
        return user_id
