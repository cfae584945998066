import os
import tempfile
from decimal import Decimal
from types import SimpleNamespace

import pytest

# до импорта приложения: engine создаётся из настроек при импорте
_DB_DIR = tempfile.mkdtemp(prefix="cloud-kitchen-")
_DB_PATH = os.path.join(_DB_DIR, "kitchen-test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ.setdefault("ORDER_FEED_INTERVAL", "0.05")
os.environ.setdefault("PHONEPE_MERCHANT_ID", "MERCHANTUAT")
os.environ.setdefault("PHONEPE_SALT_KEY", "test-salt-key")
os.environ.setdefault("PHONEPE_SALT_INDEX", "1")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402

import cloud_kitchen.models  # noqa: E402,F401
from cloud_kitchen.db.base import Base  # noqa: E402

_sync_engine = create_engine(f"sqlite:///{_DB_PATH}")


@pytest.fixture(autouse=True)
def db_schema():
    """Чистая схема на каждый тест."""
    Base.metadata.drop_all(_sync_engine)
    Base.metadata.create_all(_sync_engine)
    yield
    Base.metadata.drop_all(_sync_engine)


@pytest.fixture(scope="session")
def app():
    from cloud_kitchen.main import app as kitchen_app

    return kitchen_app


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def category(client):
    r = client.post("/api/categories/", json={"name": "Pizza", "slug": "pizza", "order": 1})
    assert r.status_code == 201
    return r.json()


@pytest.fixture()
def dish_payload(category):
    return {
        "name": "Margherita",
        "category_id": category["id"],
        "price": "200.00",
        "is_veg": True,
        "tags": ["bestseller"],
        "variants": [
            {"id": "regular", "name": "Regular", "price": "200.00"},
            {"id": "large", "name": "Large", "price": "320.00"},
        ],
        "customizations": [
            {
                "id": "toppings",
                "name": "Extra toppings",
                "min_selection": 0,
                "max_selection": 2,
                "options": [
                    {"id": "cheese", "name": "Cheese", "price": "30.00"},
                    {"id": "olives", "name": "Olives", "price": "20.00"},
                    {"id": "jalapeno", "name": "Jalapeno", "price": "25.00"},
                ],
            }
        ],
        "discount_type": "percentage",
        "discount_value": "10",
    }


@pytest.fixture()
def dish(client, dish_payload):
    r = client.post("/api/dishes/", json=dish_payload)
    assert r.status_code == 201
    return r.json()


@pytest.fixture()
def restaurant(client):
    r = client.put(
        "/api/restaurant/",
        json={
            "name": "SG Cloud Kitchen",
            "address": "Plot 213, New Malviya Nagar, Indore",
            "phone": "744-044-0128",
            "whatsapp_number": "+91 74404 40128",
            "email": "kitchen@example.com",
            "is_gst_enabled": True,
            "gst_number": "23ABCDE1234F1Z5",
        },
    )
    assert r.status_code == 200
    return r.json()


def _dish(**overrides):
    fields = {
        "id": 1,
        "name": "Paneer Tikka",
        "category_id": 1,
        "price": Decimal("200"),
        "is_veg": True,
        "is_available": True,
        "variants": [],
        "customizations": [],
        "discount_type": "none",
        "discount_value": Decimal("0"),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture()
def make_dish():
    """Объект-блюдо без базы, с теми же полями, что у модели Dish."""
    return _dish
