# tests/test_products.py
from conftest import make_product


def test_list_starts_empty(client, db_path):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == []
    assert db_path.exists()

def test_create_adds_exactly_one_record(client, seed):
    seed(products=[make_product(1)])
    body = make_product(2, quantity=7, price=9.99)
    r = client.post("/api/products", json=body)
    assert r.status_code == 201
    assert r.json() == body

    products = client.get("/api/products").json()
    assert len(products) == 2
    assert products[-1] == body

def test_create_defaults_text_fields(client):
    r = client.post("/api/products", json={"id": 5, "name": "Bolt", "price": 0.1, "quantity": 100})
    assert r.status_code == 201
    assert r.json()["description"] == ""
    assert r.json()["category"] == ""

def test_create_does_not_check_id_collisions(client, seed):
    seed(products=[make_product(1)])
    r = client.post("/api/products", json=make_product(1, name="Twin"))
    assert r.status_code == 201
    assert [p["id"] for p in client.get("/api/products").json()] == [1, 1]

def test_create_requires_id(client):
    r = client.post("/api/products", json={"name": "Nut", "price": 1.0, "quantity": 1})
    assert r.status_code == 400
    assert r.json()["error"] == "id is required"

def test_create_rejects_non_numeric_price(client, db_path):
    before = db_path.read_bytes()
    r = client.post("/api/products", json={"id": 3, "name": "Nut", "price": "cheap", "quantity": 1})
    assert r.status_code == 400
    assert "price" in r.json()["error"]
    assert db_path.read_bytes() == before

def test_get_product(client, seed):
    seed(products=[make_product(1), make_product(2)])
    r = client.get("/api/products/2")
    assert r.status_code == 200
    assert r.json()["name"] == "Widget 2"
    assert client.get("/api/products/42").status_code == 404

def test_update_replaces_whole_record(client, seed):
    seed(products=[make_product(4, description="old text", category="old")])
    r = client.put("/api/products/4", json={"name": "Renamed", "price": 3.0, "quantity": 2})
    assert r.status_code == 200
    expected = {"id": 4, "name": "Renamed", "description": "", "category": "", "price": 3.0, "quantity": 2}
    assert r.json() == expected
    assert client.get("/api/products").json() == [expected]

def test_update_keeps_path_id(client, seed):
    seed(products=[make_product(4)])
    r = client.put("/api/products/4", json=make_product(99))
    assert r.json()["id"] == 4

def test_update_missing_is_404_and_store_unchanged(client, seed, db_path):
    seed(products=[make_product(1)])
    before = db_path.read_bytes()
    r = client.put("/api/products/2", json=make_product(2))
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}
    assert db_path.read_bytes() == before

def test_update_with_non_numeric_path_is_404(client, seed):
    seed(products=[make_product(1)])
    assert client.put("/api/products/abc", json=make_product(1)).status_code == 404

def test_delete_product(client, seed):
    seed(products=[make_product(1), make_product(2)])
    r = client.delete("/api/products/1")
    assert r.status_code == 204
    assert r.content == b""
    assert [p["id"] for p in client.get("/api/products").json()] == [2]

def test_delete_missing_is_404_and_store_unchanged(client, seed, db_path):
    seed(products=[make_product(1)])
    before = db_path.read_bytes()
    r = client.delete("/api/products/7")
    assert r.status_code == 404
    assert db_path.read_bytes() == before

def test_update_missing_with_partial_body_is_404(client, seed, db_path):
    seed(products=[make_product(1)])
    before = db_path.read_bytes()
    r = client.put("/api/products/99", json={"name": "x"})
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}
    assert db_path.read_bytes() == before

def test_update_existing_with_bad_body_is_400(client, seed, db_path):
    seed(products=[make_product(1)])
    before = db_path.read_bytes()
    r = client.put("/api/products/1", json={"name": "x", "price": "free", "quantity": 1})
    assert r.status_code == 400
    assert r.json()["error"].startswith("price:")
    assert db_path.read_bytes() == before
