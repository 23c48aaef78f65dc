# tests/test_concurrency.py
import asyncio
from datetime import datetime

import httpx

from products_api.database import InMemoryProductStore, get_store
from products_api.main import app


async def _run(coros):
    return await asyncio.gather(*coros)


def _ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _client():
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


def test_concurrent_creates_get_distinct_ids():
    store = InMemoryProductStore()
    app.dependency_overrides[get_store] = lambda: store

    async def scenario():
        async with _client() as ac:
            return await _run(
                ac.post("/api/products", json={"name": f"p{i}", "price": i, "category": "x"})
                for i in range(20)
            )

    results = asyncio.run(scenario())
    assert [r.status_code for r in results] == [201] * 20
    ids = {r.json()["id"] for r in results}
    assert len(ids) == 20
    assert set(store.products) == ids


def test_concurrent_updates_to_one_product():
    store = InMemoryProductStore()
    app.dependency_overrides[get_store] = lambda: store

    async def scenario():
        async with _client() as ac:
            created = await ac.post("/api/products", json={"name": "pen", "price": 1, "category": "x"})
            pid = created.json()["id"]
            updates = await _run(
                ac.put(f"/api/products/{pid}", json={"price": float(i)}) for i in range(10)
            )
            final = await ac.get(f"/api/products/{pid}")
            return created.json(), updates, final.json()

    created, updates, final = asyncio.run(scenario())
    assert all(r.status_code == 200 for r in updates)
    # every write lands whole; the survivor is one of the submitted prices
    assert final["price"] in {float(i) for i in range(10)}
    assert final["name"] == "pen"
    stamps = sorted(_ts(r.json()["updatedAt"]) for r in updates)
    assert len(set(stamps)) == 10
    assert _ts(final["updatedAt"]) == stamps[-1]
    assert _ts(final["updatedAt"]) > _ts(created["updatedAt"])


def test_concurrent_delete_only_one_wins():
    store = InMemoryProductStore()
    app.dependency_overrides[get_store] = lambda: store

    async def scenario():
        async with _client() as ac:
            created = await ac.post("/api/products", json={"name": "pen", "price": 1, "category": "x"})
            pid = created.json()["id"]
            return await _run(ac.delete(f"/api/products/{pid}") for _ in range(5))

    results = asyncio.run(scenario())
    assert sorted(r.status_code for r in results) == [200, 404, 404, 404, 404]
    assert store.products == {}
