"""Tests for the cookie session authenticator."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Response

from skillbuilder.auth.session import SessionAuthenticator
from skillbuilder.auth.tokens import TokenCodec
from skillbuilder.errors import AuthError, AuthFailure


@pytest.fixture
def authenticator() -> SessionAuthenticator:
    codec = TokenCodec("session-test-secret-0123456789abcdef", lifetime=timedelta(minutes=90))
    return SessionAuthenticator(codec)


def test_missing_cookie(authenticator: SessionAuthenticator) -> None:
    with pytest.raises(AuthError) as exc_info:
        authenticator.authenticate({}.get)
    assert exc_info.value.reason is AuthFailure.MISSING
    assert exc_info.value.status_code == 401


def test_empty_cookie_counts_as_missing(authenticator: SessionAuthenticator) -> None:
    with pytest.raises(AuthError) as exc_info:
        authenticator.authenticate({"token": ""}.get)
    assert exc_info.value.reason is AuthFailure.MISSING


def test_valid_cookie(authenticator: SessionAuthenticator) -> None:
    token = authenticator.codec.issue("user-7")
    assert authenticator.authenticate({"token": token}.get) == "user-7"


def test_other_cookie_names_ignored(authenticator: SessionAuthenticator) -> None:
    token = authenticator.codec.issue("user-7")
    with pytest.raises(AuthError):
        authenticator.authenticate({"session": token}.get)


def test_expired_cookie(authenticator: SessionAuthenticator) -> None:
    token = authenticator.codec.issue("user-7", now=datetime.now(timezone.utc) - timedelta(days=1))
    with pytest.raises(AuthError) as exc_info:
        authenticator.authenticate({"token": token}.get)
    assert exc_info.value.reason is AuthFailure.EXPIRED


def test_start_session_sets_cookie(authenticator: SessionAuthenticator) -> None:
    response = Response()
    token = authenticator.start_session(response, "user-7")
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"token={token};")
    assert "Path=/" in cookie
    assert "Max-Age=5400" in cookie
    assert "HttpOnly" in cookie
    assert authenticator.codec.verify(token) == "user-7"


def test_end_session_clears_cookie(authenticator: SessionAuthenticator) -> None:
    response = Response()
    authenticator.end_session(response)
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "Max-Age=0" in cookie


def test_custom_cookie_name() -> None:
    codec = TokenCodec("session-test-secret-0123456789abcdef", lifetime=timedelta(hours=1))
    authenticator = SessionAuthenticator(codec, cookie_name="sb_session", cookie_secure=True)
    response = Response()
    token = authenticator.start_session(response, "u")
    assert response.headers["set-cookie"].startswith("sb_session=")
    assert "Secure" in response.headers["set-cookie"]
    assert authenticator.authenticate({"sb_session": token}.get) == "u"
