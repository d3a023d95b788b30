# tests/test_concurrency.py
import asyncio

import httpx

from conftest import make_product


async def _post_tx(ac, type, quantity, stamp):
    return await ac.post("/api/transactions", json={
        "productId": 1, "quantity": quantity, "type": type, "timestamp": stamp
    })

def _run_against(app, scenario):
    async def main():
        await app.state.store.initialize()
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            return await scenario(ac)
    return asyncio.run(main())

def test_concurrent_deducts_never_oversell(app):
    async def scenario(ac):
        await ac.post("/api/products", json=make_product(1, quantity=5))
        results = await asyncio.gather(*(_post_tx(ac, "deduct", 1, f"t{i}") for i in range(10)))
        product = (await ac.get("/api/products/1")).json()
        log = (await ac.get("/api/transactions")).json()
        return results, product, log

    results, product, log = _run_against(app, scenario)
    statuses = sorted(r.status_code for r in results)
    assert statuses == [200] * 5 + [400] * 5
    assert product["quantity"] == 0
    assert len(log) == 5

def test_concurrent_adds_lose_no_update(app):
    async def scenario(ac):
        await ac.post("/api/products", json=make_product(1, quantity=0))
        await asyncio.gather(*(_post_tx(ac, "add", 2, f"t{i}") for i in range(20)))
        product = (await ac.get("/api/products/1")).json()
        log = (await ac.get("/api/transactions")).json()
        return product, log

    product, log = _run_against(app, scenario)
    assert product["quantity"] == 40
    assert len(log) == 20
    ids = [t["id"] for t in log]
    assert ids == sorted(set(ids))
