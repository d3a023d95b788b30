# tests/conftest.py
import json

import pytest
from fastapi.testclient import TestClient

from inventory_api.config import Settings
from inventory_api.main import create_app


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "db.json"


@pytest.fixture
def app(db_path):
    return create_app(Settings(db_file=db_path, lock_timeout=2.0))


@pytest.fixture
def client(app):
    # entering the context runs the startup hook, which creates db.json
    with TestClient(app) as c:
        yield c


@pytest.fixture
def seed(db_path):
    def _seed(products=(), customers=(), transactions=()):
        db_path.write_text(json.dumps({
            "products": list(products),
            "transactions": list(transactions),
            "customers": list(customers),
        }, indent=2))
    return _seed


def make_product(id=1, quantity=10, **overrides):
    p = {"id": id, "name": f"Widget {id}", "description": "A widget",
         "category": "parts", "price": 2.5, "quantity": quantity}
    p.update(overrides)
    return p


def make_customer(id=1, **overrides):
    cu = {"id": id, "name": f"Customer {id}", "email": f"c{id}@example.com", "phone": ""}
    cu.update(overrides)
    return cu
