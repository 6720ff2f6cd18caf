"""Account router: /api/v1/user/* endpoints.

Registration and login are the only routes that run without a session.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from skillbuilder.auth.schemas import LoginRequest, RegisterRequest, SessionResponse, UserResponse
from skillbuilder.auth.service import authenticate_user, get_user_by_id, register_user
from skillbuilder.auth.session import SessionAuthenticator, get_authenticator, get_current_user_id
from skillbuilder.database import get_session
from skillbuilder.errors import NotFoundError

router = APIRouter(prefix="/api/v1/user", tags=["Users"])


@router.post("/register", response_model=SessionResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),  # noqa: B008
    authenticator: SessionAuthenticator = Depends(get_authenticator),  # noqa: B008
) -> SessionResponse:
    """Create an account and start a session for it."""
    user = await register_user(db, body.login, body.password)
    token = authenticator.start_session(response, user.id)
    return SessionResponse(id=user.id, token=token)


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),  # noqa: B008
    authenticator: SessionAuthenticator = Depends(get_authenticator),  # noqa: B008
) -> SessionResponse:
    """Check credentials and set the session cookie."""
    user = await authenticate_user(db, body.login, body.password)
    token = authenticator.start_session(response, user.id)
    return SessionResponse(id=user.id, token=token)


@router.post("/logout", status_code=204)
async def logout(
    authenticator: SessionAuthenticator = Depends(get_authenticator),  # noqa: B008
) -> Response:
    """Drop the session cookie. Tokens are not revoked server-side."""
    response = Response(status_code=204)
    authenticator.end_session(response)
    return response


@router.get("/me", response_model=UserResponse)
async def me(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> UserResponse:
    """Return the authenticated user's account."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return UserResponse.model_validate(user)
