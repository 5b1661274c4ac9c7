from __future__ import annotations

import pytest
from httpx import AsyncClient

NYC = {"lat": 40.7128, "lng": -74.0060}


async def _nearest_ids(client: AsyncClient, **params) -> list[int]:
    r = await client.get("/drivers/nearest", params={**NYC, **params})
    assert r.status_code == 200, r.text
    return [it["id"] for it in r.json()["items"]]


@pytest.mark.asyncio
async def test_nearest_sample_drivers(app_client: AsyncClient):
    assert await _nearest_ids(app_client, k=2) == [1, 2]


@pytest.mark.asyncio
async def test_cancel_then_requery_skips_driver(app_client: AsyncClient):
    r = await app_client.post("/drivers/1/cancel")
    assert r.status_code == 200
    assert r.json()["available"] is False

    assert await _nearest_ids(app_client, k=2) == [2, 3]

    stats = (await app_client.get("/drivers/stats")).json()
    assert stats["size"] == 3
    assert stats["available"] == 2


@pytest.mark.asyncio
async def test_nearest_defaults_and_limits(app_client: AsyncClient):
    r = await app_client.get("/drivers/nearest")
    assert r.status_code == 200
    body = r.json()
    # 既定の基準点（NYC）と DEFAULT_K
    assert body["k"] == 5
    assert [it["id"] for it in body["items"]] == [1, 2, 3]

    assert await _nearest_ids(app_client, k=0) == []

    r = await app_client.get("/drivers/nearest", params={**NYC, "k": 500})
    assert r.status_code == 200
    assert r.json()["k"] == 50


@pytest.mark.parametrize(
    "params",
    [
        {"lat": 91, "lng": 0},
        {"lat": 0, "lng": -181},
        {"lat": 0, "lng": 0, "k": -1},
        {"lat": 0, "lng": 0, "strategy": "h3"},
    ],
)
@pytest.mark.asyncio
async def test_nearest_validation_errors(app_client: AsyncClient, params):
    r = await app_client.get("/drivers/nearest", params=params)
    assert r.status_code == 422
    assert r.json() == {"detail": "Unprocessable Entity"}


@pytest.mark.asyncio
async def test_nearest_linear_and_rerank(app_client: AsyncClient):
    linear = await _nearest_ids(app_client, k=3, strategy="linear")
    reranked = await _nearest_ids(app_client, k=3, rerank="true")

    assert linear == reranked == [1, 2, 3]

    r = await app_client.get("/drivers/nearest", params={**NYC, "k": 2, "rerank": "true"})
    body = r.json()
    assert body["reranked"] is True
    assert body["items"][1]["distance_km"] == pytest.approx(5.42, rel=0.02)


@pytest.mark.asyncio
async def test_register_assigns_id_and_name(app_client: AsyncClient):
    r = await app_client.post("/drivers", json={"lat": 40.7130, "lng": -74.0062})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["id"] == 4
    assert body["name"] == "Driver 4"
    assert body["available"] is True

    assert await _nearest_ids(app_client, k=2) == [1, 4]


@pytest.mark.asyncio
async def test_register_duplicate_id_conflicts(app_client: AsyncClient):
    r = await app_client.post("/drivers", json={"id": 1, "lat": 0.0, "lng": 0.0})
    assert r.status_code == 409
    assert "already exists" in r.json()["detail"]


@pytest.mark.asyncio
async def test_register_rejects_out_of_range_position(app_client: AsyncClient):
    r = await app_client.post("/drivers", json={"lat": 100.0, "lng": 0.0})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_update_relocates_driver(app_client: AsyncClient):
    await app_client.post("/drivers/1/cancel")

    r = await app_client.put("/drivers/3", json={"lat": 40.7129, "lng": -74.0061})
    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Bob"

    assert await _nearest_ids(app_client, k=1) == [3]
    stats = (await app_client.get("/drivers/stats")).json()
    assert stats["partitioned"] is True
    assert stats["size"] == 3


@pytest.mark.asyncio
async def test_update_twice_is_idempotent(app_client: AsyncClient):
    payload = {"lat": 40.7300, "lng": -74.0000, "available": True}

    await app_client.put("/drivers/2", json=payload)
    once = (await app_client.get("/drivers/nearest", params={**NYC, "k": 3})).json()["items"]
    await app_client.put("/drivers/2", json=payload)
    twice = (await app_client.get("/drivers/nearest", params={**NYC, "k": 3})).json()["items"]

    assert once == twice


@pytest.mark.asyncio
async def test_update_requires_a_field_and_existing_driver(app_client: AsyncClient):
    r = await app_client.put("/drivers/1", json={})
    assert r.status_code == 422

    r = await app_client.put("/drivers/99", json={"lat": 1.0})
    assert r.status_code == 404
    assert r.json() == {"detail": "driver not found"}


@pytest.mark.asyncio
async def test_availability_toggle(app_client: AsyncClient):
    r = await app_client.patch("/drivers/1/availability", json={"available": False})
    assert r.status_code == 200
    assert await _nearest_ids(app_client, k=1) == [2]

    r = await app_client.patch("/drivers/1/availability", json={"available": True})
    assert r.status_code == 200
    assert await _nearest_ids(app_client, k=1) == [1]

    r = await app_client.patch("/drivers/42/availability", json={"available": True})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_get_list_and_delete(app_client: AsyncClient):
    r = await app_client.get("/drivers/2")
    assert r.status_code == 200
    assert r.json()["name"] == "Alice"

    r = await app_client.delete("/drivers/1")
    assert r.status_code == 204
    assert (await app_client.get("/drivers/1")).status_code == 404
    assert (await app_client.delete("/drivers/1")).status_code == 404

    r = await app_client.get("/drivers")
    assert [d["id"] for d in r.json()] == [2, 3]
    assert await _nearest_ids(app_client, k=5) == [2, 3]


@pytest.mark.asyncio
async def test_list_filter_and_clear(app_client: AsyncClient):
    await app_client.post("/drivers/2/cancel")

    r = await app_client.get("/drivers", params={"available": "false"})
    assert [d["id"] for d in r.json()] == [2]

    r = await app_client.delete("/drivers")
    assert r.json() == {"removed": 3}
    assert (await app_client.get("/drivers")).json() == []
    assert await _nearest_ids(app_client, k=3) == []
