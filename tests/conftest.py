import json
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from storefront.api import deps
from storefront.domain.models.category import Category, name_key
from storefront.domain.models.product import LIST_FIELDS, Product
from storefront.domain.repositories.category_repo import CategoryExists
from storefront.domain.repositories.user_repo import UserExists
from storefront.main import app


# ----- in-memory repositories (same async surface as the Mongo ones) -----------

class FakeProductRepo:
    def __init__(self):
        self.docs = {}

    async def list(self, category=None):
        docs = [d for d in self.docs.values() if not category or d.get("category") == category]
        docs.sort(key=lambda d: d.get("created_at") or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
        return [Product.from_document(d) for d in docs]

    async def get(self, product_id):
        doc = self.docs.get(product_id)
        return Product.from_document(doc) if doc else None

    async def insert(self, product):
        self.docs[product.id] = product.to_document()
        return product

    async def update(self, product_id, fields):
        doc = self.docs.get(product_id)
        if doc is None:
            return None
        patch = dict(fields)
        for f in LIST_FIELDS:
            if f in patch:
                patch[f] = json.dumps(patch[f] or [])
        patch["updated_at"] = datetime.now(timezone.utc)
        doc.update(patch)
        return Product.from_document(doc)

    async def delete(self, product_id):
        return self.docs.pop(product_id, None) is not None

    async def count_referencing(self, category_id, category_name):
        return sum(
            1 for d in self.docs.values()
            if d.get("category_id") == category_id or d.get("category") == category_name
        )


class FakeCategoryRepo:
    def __init__(self):
        self.items = {}

    async def list(self):
        return sorted(self.items.values(), key=lambda c: c.name)

    async def get(self, category_id):
        return self.items.get(category_id)

    async def get_by_name(self, name):
        for c in self.items.values():
            if name_key(c.name) == name_key(name):
                return c
        return None

    async def insert(self, category: Category):
        if await self.get_by_name(category.name):
            raise CategoryExists(category.name)
        self.items[category.id] = category
        return category

    async def delete(self, category_id):
        return self.items.pop(category_id, None) is not None


class FakeUserRepo:
    def __init__(self):
        self.rows = {}

    async def find_by_email(self, email):
        return self.rows.get(email.strip().lower())

    async def insert(self, doc):
        email = doc["email"].strip().lower()
        if email in self.rows:
            raise UserExists(email)
        self.rows[email] = {**doc, "email": email}
        return self.rows[email]


class FakeOrderRepo:
    def __init__(self, orders=None):
        self.orders = orders or []

    async def completed_summary(self):
        done = [o for o in self.orders if o["status"] == "completed"]
        return {"net_sales": float(sum(o["total"] for o in done)), "total_orders": len(done)}


class FakeObjectStore:
    def __init__(self):
        self.objects = {}

    async def put(self, key, data, content_type):
        self.objects[key] = (data, content_type or "application/octet-stream")
        return key

    async def get(self, key):
        return self.objects.get(key)


class Repos:
    def __init__(self):
        self.products = FakeProductRepo()
        self.categories = FakeCategoryRepo()
        self.users = FakeUserRepo()
        self.orders = FakeOrderRepo()
        self.objects = FakeObjectStore()


@pytest.fixture
def repos():
    return Repos()


@pytest.fixture
def api_app(repos):
    app.dependency_overrides.update({
        deps.product_repo_dep: lambda: repos.products,
        deps.category_repo_dep: lambda: repos.categories,
        deps.object_store_dep: lambda: repos.objects,
        deps.user_repo_dep: lambda: repos.users,
        deps.user_repo_optional: lambda: repos.users,
        deps.order_repo_optional: lambda: repos.orders,
        deps.redis_dep: lambda: None,
    })
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    # no `with`: lifespan (Mongo/Redis connections) is not started
    return TestClient(api_app)


@pytest.fixture
def state_path(tmp_path):
    return str(tmp_path / "state.json")


def product_body(**overrides):
    body = {
        "title": "Spika JBL",
        "price": 50000,
        "discount": 20,
        "category": "Spika",
        "images": ["https://cdn.example/a.jpg", "https://cdn.example/b.jpg"],
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_product():
    return product_body
