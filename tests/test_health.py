from storefront.db import mongo


def test_health_without_store_is_degraded(client, monkeypatch):
    monkeypatch.setattr(mongo, "get_db_or_none", lambda: None)
    res = client.get("/health")
    assert res.status_code == 503
    body = res.json()
    assert body["status"] == "degraded"
    assert body["checks"] == {"store": {"status": "unavailable"}, "redis": "skipped"}


def test_unknown_route_uses_envelope(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.json()["success"] is False
