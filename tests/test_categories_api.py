def test_create_and_list_sorted(client):
    assert client.post("/api/categories", json={"name": "Spika", "icon": "🔊"}).status_code == 201
    assert client.post("/api/categories", json={"name": "Mic"}).status_code == 201
    names = [c["name"] for c in client.get("/api/categories").json()["data"]]
    assert names == ["Mic", "Spika"]


def test_get_by_id(client):
    cat = client.post("/api/categories", json={"name": "Mic"}).json()["data"]
    assert client.get("/api/categories", params={"id": cat["id"]}).json()["data"]["name"] == "Mic"
    assert client.get("/api/categories", params={"id": "nope"}).status_code == 404


def test_duplicate_name_conflicts(client):
    client.post("/api/categories", json={"name": "Mobiles"})
    res = client.post("/api/categories", json={"name": " mobiles "})
    assert res.status_code == 409
    assert res.json()["success"] is False


def test_missing_name(client):
    res = client.post("/api/categories", json={"name": "   "})
    assert res.status_code == 400
    assert res.json()["error"] == "Missing name"


def test_delete_referenced_category_is_refused(client, repos, make_product):
    cat = client.post("/api/categories", json={"name": "Spika"}).json()["data"]
    client.post("/api/products", json=make_product(category="Spika"))

    res = client.delete("/api/categories", params={"id": cat["id"]})
    assert res.status_code == 409
    assert cat["id"] in repos.categories.items


def test_delete_referenced_via_category_id(client, repos, make_product):
    cat = client.post("/api/categories", json={"name": "Mic"}).json()["data"]
    client.post("/api/products", json=make_product(category=None, categoryId=cat["id"]))
    assert client.delete("/api/categories", params={"id": cat["id"]}).status_code == 409


def test_delete_unreferenced_category(client, repos):
    cat = client.post("/api/categories", json={"name": "Subwoofer"}).json()["data"]
    res = client.delete("/api/categories", params={"id": cat["id"]})
    assert res.json() == {"success": True, "deleted": True}
    assert repos.categories.items == {}
