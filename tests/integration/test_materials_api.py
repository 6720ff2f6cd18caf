"""Material endpoints: CRUD, types, ownership, completion toggles."""

import pytest
from httpx import AsyncClient

from skillbuilder.catalog.seed import MATERIAL_TYPE_SEED_DATA
from skillbuilder.db.models import MAX_XP


async def _create_material(client: AsyncClient, headers: dict, **fields) -> dict:
    response = await client.post("/api/v1/material", json={"name": "Material", **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_material_types_listed(client: AsyncClient, alice) -> None:
    _, headers = alice
    response = await client.get("/api/v1/material/type", headers=headers)
    assert response.status_code == 200
    names = {t["name"] for t in response.json()}
    assert names == {d["name"] for d in MATERIAL_TYPE_SEED_DATA}


@pytest.mark.asyncio
async def test_create_get_update_delete(client: AsyncClient, alice) -> None:
    alice_id, headers = alice
    type_id = MATERIAL_TYPE_SEED_DATA[1]["id"]
    created = await _create_material(
        client, headers, name="Talk", description="Conference talk", type_id=type_id, xp=15, link="https://v"
    )
    assert created["user_id"] == alice_id
    assert (created["type_id"], created["xp"]) == (type_id, 15)

    url = f"/api/v1/material/{created['id']}"
    assert (await client.get(url, headers=headers)).json()["name"] == "Talk"

    response = await client.put(url, json={"name": "Talk v2", "xp": 20}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert (body["name"], body["xp"], body["type_id"]) == ("Talk v2", 20, None)

    assert (await client.delete(url, headers=headers)).status_code == 204
    assert (await client.get(url, headers=headers)).status_code == 404


@pytest.mark.asyncio
async def test_any_user_can_read(client: AsyncClient, alice, bob) -> None:
    _, alice_headers = alice
    _, bob_headers = bob
    material = await _create_material(client, alice_headers, xp=3)
    response = await client.get(f"/api/v1/material/{material['id']}", headers=bob_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_only_owner_can_mutate(client: AsyncClient, alice, bob) -> None:
    _, alice_headers = alice
    _, bob_headers = bob
    material = await _create_material(client, alice_headers, name="Original", xp=3)
    url = f"/api/v1/material/{material['id']}"

    assert (await client.put(url, json={"name": "Stolen"}, headers=bob_headers)).status_code == 403
    assert (await client.delete(url, headers=bob_headers)).status_code == 403
    assert (await client.get(url, headers=alice_headers)).json()["name"] == "Original"


@pytest.mark.asyncio
async def test_create_into_foreign_collection_forbidden(client: AsyncClient, alice, bob) -> None:
    _, alice_headers = alice
    _, bob_headers = bob
    collection = (await client.post("/api/v1/collection", json={"name": "Alice's"}, headers=alice_headers)).json()

    response = await client.post(
        "/api/v1/material",
        json={"name": "Sneaky", "xp": 100, "collection_id": collection["id"]},
        headers=bob_headers,
    )
    assert response.status_code == 403

    view = (await client.get(f"/api/v1/collection/{collection['id']}", headers=alice_headers)).json()
    assert view["total_xp"] == 0


@pytest.mark.asyncio
async def test_create_into_missing_collection(client: AsyncClient, alice) -> None:
    _, headers = alice
    response = await client.post(
        "/api/v1/material", json={"name": "Lost", "collection_id": "missing"}, headers=headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_negative_xp_rejected(client: AsyncClient, alice) -> None:
    _, headers = alice
    response = await client.post("/api/v1/material", json={"name": "Bad", "xp": -5}, headers=headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_xp_beyond_column_range_rejected(client: AsyncClient, alice) -> None:
    _, headers = alice
    for xp in (2**31, 2**63):
        response = await client.post("/api/v1/material", json={"name": "Big", "xp": xp}, headers=headers)
        assert response.status_code == 400, xp
        assert response.json()["error"] == "bad_request"

    material = await _create_material(client, headers, xp=1)
    response = await client.put(
        f"/api/v1/material/{material['id']}", json={"name": "Big", "xp": 2**62}, headers=headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_max_xp_materials_keep_listings_working(client: AsyncClient, alice, bob) -> None:
    _, alice_headers = alice
    _, bob_headers = bob
    collection = (await client.post("/api/v1/collection", json={"name": "Heavy"}, headers=alice_headers)).json()
    for _ in range(2):
        await _create_material(client, alice_headers, xp=MAX_XP, collection_id=collection["id"])

    response = await client.get("/api/v1/collections", headers=bob_headers)
    assert response.status_code == 200
    heavy = next(c for c in response.json() if c["id"] == collection["id"])
    assert (heavy["total_xp"], heavy["earned_xp"]) == (2 * MAX_XP, 0)


@pytest.mark.asyncio
async def test_unknown_type_rejected(client: AsyncClient, alice) -> None:
    _, headers = alice
    response = await client.post("/api/v1/material", json={"name": "Bad", "type_id": "nope"}, headers=headers)
    assert response.status_code == 400
    assert "Unknown material type" in response.json()["detail"]


@pytest.mark.asyncio
async def test_completion_toggles(client: AsyncClient, alice) -> None:
    _, headers = alice
    material = await _create_material(client, headers, xp=5)
    base = f"/api/v1/material/{material['id']}"

    response = await client.post(f"{base}/completed", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"material_id": material["id"], "completed": True}

    response = await client.post(f"{base}/completed", headers=headers)
    assert response.json()["completed"] is True

    response = await client.post(f"{base}/incomplete", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"material_id": material["id"], "completed": False}


@pytest.mark.asyncio
async def test_completion_status_is_per_user(client: AsyncClient, alice, bob) -> None:
    _, alice_headers = alice
    _, bob_headers = bob
    material = await _create_material(client, alice_headers, xp=5)
    url = f"/api/v1/material/{material['id']}/completed"

    response = await client.get(url, headers=alice_headers)
    assert response.status_code == 200
    assert response.json() == {"material_id": material["id"], "completed": False}

    await client.post(url, headers=alice_headers)
    assert (await client.get(url, headers=alice_headers)).json()["completed"] is True
    assert (await client.get(url, headers=bob_headers)).json()["completed"] is False

    await client.post(f"/api/v1/material/{material['id']}/incomplete", headers=alice_headers)
    assert (await client.get(url, headers=alice_headers)).json()["completed"] is False


@pytest.mark.asyncio
async def test_completion_requires_session(client: AsyncClient) -> None:
    response = await client.post("/api/v1/material/anything/completed")
    assert response.status_code == 401
