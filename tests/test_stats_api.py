from storefront.api import deps

ZEROS = {"netSales": 0, "earnings": 0, "pageViews": 0, "totalOrders": 0}


def test_stats_from_completed_orders(client, repos):
    repos.orders.orders = [
        {"status": "completed", "total": 100000},
        {"status": "completed", "total": 15000},
        {"status": "pending", "total": 99999},
    ]
    body = client.get("/api/stats").json()
    assert body["success"] is True
    assert body["data"] == {"netSales": 115000.0, "earnings": 97750, "pageViews": 0, "totalOrders": 2}


def test_stats_without_store_are_zeros(client, api_app):
    api_app.dependency_overrides[deps.order_repo_optional] = lambda: None
    assert client.get("/api/stats").json() == {"success": True, "data": ZEROS}


def test_stats_store_error_are_zeros(client, api_app):
    class Broken:
        async def completed_summary(self):
            raise RuntimeError("boom")

    api_app.dependency_overrides[deps.order_repo_optional] = lambda: Broken()
    assert client.get("/api/stats").json()["data"] == ZEROS
