import os

os.environ.setdefault("SHOP_DOMAIN", "test-shop.myshopify.com")
os.environ.setdefault("ADMIN_API_ACCESS_TOKEN", "shpat_test_token")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")

import pytest
from fastapi.testclient import TestClient

from factories import Catalog, FakeAdminClient, make_node


@pytest.fixture
def catalog():
    nodes = [
        make_node(
            i,
            status="DRAFT" if i % 3 == 0 else "ACTIVE",
            total_inventory=i % 10,
            collections=["Summer"] if i % 2 == 0 else ["Winter", "Sale"],
        )
        for i in range(1, 46)
    ]
    return Catalog(nodes)


@pytest.fixture
def fake_client(catalog):
    return FakeAdminClient(
        products=catalog.window,
        levels=[
            {"inventoryItemId": str(9000 + i), "available": i * 2, "committed": 1, "locationId": "77"}
            for i in range(1, 46)
            if i % 5 != 0
        ],
        meta={
            "collections": [
                {"id": "gid://shopify/Collection/1", "title": "Summer"},
                {"id": "gid://shopify/Collection/2", "title": "Winter"},
            ],
            "tags": ["new", "clearance"],
        },
    )


@pytest.fixture
def app_client(fake_client):
    from app.main import app
    from app.api.dependencies import get_admin_client

    app.dependency_overrides[get_admin_client] = lambda: fake_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
