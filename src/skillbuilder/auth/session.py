"""Cookie session: authenticate requests and carry the token to the client."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from fastapi import Request, Response

from skillbuilder.auth.tokens import TokenCodec
from skillbuilder.config import Settings
from skillbuilder.errors import AuthError, AuthFailure

logger = structlog.get_logger()


class SessionAuthenticator:
    """Resolve the authenticated user id from a request's session cookie.

    Holds no per-request state; one instance serves the whole process.
    """

    def __init__(
        self,
        codec: TokenCodec,
        *,
        cookie_name: str = "token",
        cookie_secure: bool = False,
    ) -> None:
        self.codec = codec
        self.cookie_name = cookie_name
        self.cookie_secure = cookie_secure

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionAuthenticator:
        return cls(
            TokenCodec.from_settings(settings),
            cookie_name=settings.session_cookie_name,
            cookie_secure=settings.session_cookie_secure,
        )

    def authenticate(self, get_cookie: Callable[[str], str | None]) -> str:
        """Return the user id carried by the session cookie.

        Raises:
            AuthError: the cookie is absent or its token fails verification.
        """
        token = get_cookie(self.cookie_name)
        if not token:
            raise AuthError(AuthFailure.MISSING, "Not authenticated")
        return self.codec.verify(token)

    def start_session(self, response: Response, user_id: str) -> str:
        """Issue a token for `user_id` and set it as the session cookie."""
        token = self.codec.issue(user_id)
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(self.codec.lifetime.total_seconds()),
            path="/",
            httponly=True,
            secure=self.cookie_secure,
            samesite="lax",
        )
        return token

    def end_session(self, response: Response) -> None:
        """Tell the client to discard its session cookie."""
        response.delete_cookie(key=self.cookie_name, path="/")


def get_authenticator(request: Request) -> SessionAuthenticator:
    """FastAPI dependency: the authenticator built by the app factory."""
    return request.app.state.authenticator


async def get_current_user_id(request: Request) -> str:
    """
    Authenticate the request from its session cookie.

    The resolved id is also stored on `request.state.user_id`. Raises 401
    (via AuthError) before any handler body runs.
    """
    authenticator = get_authenticator(request)
    try:
        user_id = authenticator.authenticate(request.cookies.get)
    except AuthError as e:
        logger.info("session_rejected", reason=e.reason.value, path=request.url.path)
        raise
    request.state.user_id = user_id
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id
