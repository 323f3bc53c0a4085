import pytest

from app.core.exceptions import AdminAPIError
from app.services.dashboard import get_dashboard_metrics

from factories import FakeAdminClient, connection, make_node


def _slices(variables):
    query = variables.get("query") or ""
    if query.startswith("inventory_total:"):
        quantities = [7, 1, 0, 9, 3, 2, 6, 8]
        return connection([make_node(100 + i, total_inventory=q) for i, q in enumerate(quantities)])
    if query == "status:draft":
        return connection([make_node(200 + i, status="DRAFT") for i in range(5)])
    return connection([make_node(i) for i in range(1, 6)])


@pytest.mark.asyncio
async def test_dashboard_loads_three_slices():
    client = FakeAdminClient(products=_slices)

    metrics = await get_dashboard_metrics(client, slice_size=5)

    assert len(client.product_calls) == 3
    assert [p.title for p in metrics.recent_products] == [f"Product {i}" for i in range(1, 6)]
    assert all(p.status == "DRAFT" for p in metrics.recent_drafts)
    assert [p.total_inventory for p in metrics.low_stock_products] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_dashboard_over_fetches_low_stock_candidates():
    client = FakeAdminClient(products=_slices)

    await get_dashboard_metrics(client, slice_size=5)

    low_stock_call = next(c for c in client.product_calls if (c.get("query") or "").startswith("inventory_total"))
    assert low_stock_call == {"first": 20, "query": "inventory_total:<6"}


@pytest.mark.asyncio
async def test_dashboard_fails_when_any_slice_fails():
    def products(variables):
        if variables.get("query") == "status:draft":
            raise AdminAPIError("GraphQL query failed: 500", 500)
        return _slices(variables)

    client = FakeAdminClient(products=products)

    with pytest.raises(AdminAPIError):
        await get_dashboard_metrics(client, slice_size=5)
