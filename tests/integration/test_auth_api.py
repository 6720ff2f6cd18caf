"""Account endpoints: register, login, logout, me."""

import pytest
from httpx import AsyncClient

from tests.conftest import TEST_PASSWORD, register


@pytest.mark.asyncio
async def test_register_returns_session(client: AsyncClient) -> None:
    response = await client.post("/api/v1/user/register", json={"login": "carol", "password": TEST_PASSWORD})
    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["token"]
    assert response.cookies.get("token") == data["token"]


@pytest.mark.asyncio
async def test_register_duplicate_login_conflicts(client: AsyncClient) -> None:
    await register(client, "carol")
    response = await client.post("/api/v1/user/register", json={"login": "carol", "password": TEST_PASSWORD})
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient) -> None:
    response = await client.post("/api/v1/user/register", json={"login": "carol", "password": "weakpass"})
    assert response.status_code == 400
    assert response.json()["error"] == "weak_password"


@pytest.mark.asyncio
async def test_register_blank_login(client: AsyncClient) -> None:
    response = await client.post("/api/v1/user/register", json={"login": "   ", "password": TEST_PASSWORD})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_sets_cookie(client: AsyncClient) -> None:
    user_id, _ = await register(client, "dave")
    response = await client.post("/api/v1/user/login", json={"login": "dave", "password": TEST_PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == user_id

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"token={data['token']};")
    assert "Path=/" in set_cookie
    assert "Max-Age=86400" in set_cookie
    assert "HttpOnly" in set_cookie


@pytest.mark.asyncio
async def test_login_cookie_authenticates_following_requests(client: AsyncClient) -> None:
    await register(client, "dave")
    await client.post("/api/v1/user/login", json={"login": "dave", "password": TEST_PASSWORD})
    response = await client.get("/api/v1/user/me")
    assert response.status_code == 200
    assert response.json()["login"] == "dave"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient) -> None:
    await register(client, "dave")
    response = await client.post("/api/v1/user/login", json={"login": "dave", "password": "WrongPass99"})
    assert response.status_code == 401
    assert "set-cookie" not in response.headers


@pytest.mark.asyncio
async def test_login_unknown_user(client: AsyncClient) -> None:
    response = await client.post("/api/v1/user/login", json={"login": "nobody", "password": TEST_PASSWORD})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_me_requires_session(client: AsyncClient) -> None:
    response = await client.get("/api/v1/user/me")
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


@pytest.mark.asyncio
async def test_me_rejects_tampered_cookie(client: AsyncClient) -> None:
    _, headers = await register(client, "erin")
    token = headers["Cookie"].removeprefix("token=")
    header, payload, signature = token.split(".")
    middle = len(payload) // 2
    payload = payload[:middle] + ("A" if payload[middle] != "A" else "B") + payload[middle + 1 :]
    response = await client.get("/api/v1/user/me", headers={"Cookie": f"token={header}.{payload}.{signature}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient) -> None:
    _, headers = await register(client, "frank")
    response = await client.post("/api/v1/user/logout", headers=headers)
    assert response.status_code == 204
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("token=")
    assert "Max-Age=0" in set_cookie
