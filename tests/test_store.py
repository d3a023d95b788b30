# tests/test_store.py
import asyncio
import json

import pytest

from inventory_api.database import StoreHandle, empty_store
from inventory_api.errors import LockTimeout, StoreCorrupt
from conftest import make_customer, make_product


def run(coro):
    return asyncio.run(coro)

def _sample_store():
    return {
        "products": [make_product(2, quantity=1), make_product(1, price=-1.0)],
        "transactions": [{"id": 5, "productId": 2, "customerId": 3, "quantity": 1,
                          "type": "deduct", "timestamp": "2024-05-01"}],
        "customers": [make_customer(3, phone="555"), make_customer(1)],
    }

def test_write_then_read_round_trip(db_path):
    store = StoreHandle(db_path)
    data = _sample_store()
    run(store.write(data))
    assert run(store.read()) == data

def test_write_is_deterministic(db_path):
    store = StoreHandle(db_path)
    data = _sample_store()
    run(store.write(data))
    assert db_path.read_text(encoding="utf-8") == json.dumps(data, indent=2)
    assert list(json.loads(db_path.read_text())) == ["products", "transactions", "customers"]

def test_initialize_creates_missing_file(db_path):
    run(StoreHandle(db_path).initialize())
    assert json.loads(db_path.read_text()) == empty_store()

@pytest.mark.parametrize("content", ["", "   \n", "{not json", "[1, 2]"])
def test_initialize_resets_bad_content(db_path, content):
    db_path.write_text(content)
    run(StoreHandle(db_path).initialize())
    assert json.loads(db_path.read_text()) == empty_store()

def test_initialize_fills_missing_collections(db_path):
    db_path.write_text(json.dumps({"products": [make_product(1)]}))
    run(StoreHandle(db_path).initialize())
    data = json.loads(db_path.read_text())
    assert data["products"] == [make_product(1)]
    assert data["customers"] == []
    assert data["transactions"] == []

def test_initialize_keeps_valid_store(db_path):
    data = _sample_store()
    db_path.write_text(json.dumps(data))
    before = db_path.read_bytes()
    run(StoreHandle(db_path).initialize())
    assert db_path.read_bytes() == before

@pytest.mark.parametrize("content", ["", "{oops", "42"])
def test_read_refuses_corrupt_store(db_path, content):
    db_path.write_text(content)
    with pytest.raises(StoreCorrupt):
        run(StoreHandle(db_path).read())
    # read never repairs
    assert db_path.read_text() == content

def test_read_missing_file_is_corrupt(db_path):
    with pytest.raises(StoreCorrupt):
        run(StoreHandle(db_path).read())

def test_lock_wait_is_bounded(db_path):
    async def scenario():
        store = StoreHandle(db_path, lock_timeout=0.05)
        await store.initialize()
        async with store.cycle():
            with pytest.raises(LockTimeout):
                await store.read()
        # released again after the cycle
        assert await store.read() == empty_store()
    run(scenario())

def test_cycle_releases_lock_on_error(db_path):
    async def scenario():
        store = StoreHandle(db_path, lock_timeout=0.05)
        await store.initialize()
        with pytest.raises(RuntimeError):
            async with store.cycle() as tx:
                await tx.read()
                raise RuntimeError("boom")
        await store.write(empty_store())
    run(scenario())

def test_corrupt_store_fails_request_only(client, db_path):
    db_path.write_text("{broken")
    r = client.get("/api/products")
    assert r.status_code == 500
    assert "not valid JSON" in r.json()["error"]

    db_path.write_text(json.dumps(empty_store()))
    assert client.get("/api/products").status_code == 200

def test_lone_surrogates_round_trip(db_path):
    store = StoreHandle(db_path)
    data = empty_store()
    data["products"].append(make_product(1, name="\ud800 odd"))
    run(store.write(data))
    assert run(store.read()) == data
    # later writes keep working
    data["customers"].append(make_customer(1))
    run(store.write(data))
    assert run(store.read())["customers"] == [make_customer(1)]

@pytest.mark.parametrize("bad", [None, {}, "x", 3])
def test_read_refuses_non_list_collection(db_path, bad):
    db_path.write_text(json.dumps({"products": bad, "transactions": [], "customers": []}))
    with pytest.raises(StoreCorrupt):
        run(StoreHandle(db_path).read())

def test_non_list_collection_fails_request(client, db_path):
    db_path.write_text(json.dumps({"products": None, "transactions": [], "customers": []}))
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Database collection 'products' is not a list"}
