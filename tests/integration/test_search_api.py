"""Search endpoint: global scope, personalized collection totals."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_search_is_global(client: AsyncClient, alice, bob) -> None:
    _, alice_headers = alice
    _, bob_headers = bob
    collection = (
        await client.post(
            "/api/v1/collection",
            json={"name": "Rust basics", "description": "Ownership and borrowing"},
            headers=alice_headers,
        )
    ).json()
    material = (
        await client.post(
            "/api/v1/material",
            json={"name": "The Rust Book", "xp": 50, "collection_id": collection["id"]},
            headers=alice_headers,
        )
    ).json()
    await client.post(f"/api/v1/material/{material['id']}/completed", headers=bob_headers)

    response = await client.post("/api/v1/search", json={"query": "Rust"}, headers=bob_headers)
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data["collections"]] == [collection["id"]]
    assert (data["collections"][0]["total_xp"], data["collections"][0]["earned_xp"]) == (50, 50)
    assert [m["id"] for m in data["materials"]] == [material["id"]]
    assert "completed" not in data["materials"][0]

    alice_data = (await client.post("/api/v1/search", json={"query": "Rust"}, headers=alice_headers)).json()
    assert alice_data["collections"][0]["earned_xp"] == 0


@pytest.mark.asyncio
async def test_search_matches_description(client: AsyncClient, alice) -> None:
    _, headers = alice
    await client.post(
        "/api/v1/collection", json={"name": "Go", "description": "goroutines and channels"}, headers=headers
    )
    data = (await client.post("/api/v1/search", json={"query": "channels"}, headers=headers)).json()
    assert [c["name"] for c in data["collections"]] == ["Go"]


@pytest.mark.asyncio
async def test_search_no_match(client: AsyncClient, alice) -> None:
    _, headers = alice
    data = (await client.post("/api/v1/search", json={"query": "Haskell"}, headers=headers)).json()
    assert data == {"collections": [], "materials": []}


@pytest.mark.asyncio
async def test_empty_query_rejected(client: AsyncClient, alice) -> None:
    _, headers = alice
    response = await client.post("/api/v1/search", json={"query": ""}, headers=headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_requires_session(client: AsyncClient) -> None:
    response = await client.post("/api/v1/search", json={"query": "x"})
    assert response.status_code == 401
