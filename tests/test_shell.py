import pytest

from storefront.client.errors import NetworkError, PermissionDeniedError, ServerError
from storefront.client.session import LocalStore, Session
from storefront.client.shell import StorefrontShell
from storefront.domain.models.category import Category
from storefront.domain.models.product import Product
from storefront.domain.models.user import User

ADMIN = User(id="u1", name="Admin", email="admin@sonko.tz", role="admin")
CUSTOMER = User(id="u2", name="Neema", email="neema@sonko.tz", role="customer")


def product(pid, title, category, category_id=None):
    return Product(id=pid, title=title, image=f"https://cdn.example/{pid}.jpg", price=1000,
                   category=category, category_id=category_id)


PRODUCTS = [
    product("p1", "Spika JBL", "Spika", "c1"),
    product("p2", "Mic Shure", "Mic", "c2"),
    product("p3", "Spika Sony", "Spika"),
    product("p4", "Simu Tecno", "Mobiles"),
]
CATEGORIES = [
    Category(id="c0", name="Bidhaa Zote"),
    Category(id="c1", name="Spika"),
    Category(id="c2", name="Mic"),
]


class FakeShopApi:
    def __init__(self, products_error=None, users=None):
        self.products_error = products_error
        self.users = users or {}
        self.created = []
        self.deleted = []

    async def list_products(self, category=None):
        if self.products_error:
            raise self.products_error
        return list(PRODUCTS)

    async def list_categories(self):
        return list(CATEGORIES)

    async def login(self, email, password):
        user = self.users.get((email, password))
        if user is None:
            raise ServerError("Invalid credentials", status_code=401)
        return user

    async def create_product(self, payload):
        self.created.append(payload)
        return product("new", payload["title"], payload.get("category"))

    async def update_product(self, product_id, fields):
        current = next(p for p in PRODUCTS if p.id == product_id)
        return current.model_copy(update=fields)

    async def delete_product(self, product_id):
        self.deleted.append(product_id)
        return True

    async def create_category(self, name, icon=None):
        if any(c.name.lower() == name.lower() for c in CATEGORIES):
            raise ServerError(f"Category '{name}' already exists", status_code=409)
        return Category(id="c9", name=name, icon=icon)

    async def delete_category(self, category_id):
        self.deleted.append(category_id)
        return True

    async def fetch_stats(self):
        return {"netSales": 10.0, "earnings": 8, "pageViews": 3, "totalOrders": 1}


@pytest.fixture
def session(state_path):
    return Session(LocalStore(state_path))


@pytest.fixture
async def shell(session):
    s = StorefrontShell(FakeShopApi(users={("admin@sonko.tz", "pw"): ADMIN}), session, phone_number="+255712345678")
    await s.load()
    return s


async def test_load_fills_catalog(shell):
    assert [p.id for p in shell.products] == ["p1", "p2", "p3", "p4"]
    assert len(shell.categories) == 3
    assert shell.view == "home"


async def test_failed_half_of_load_stays_empty(session):
    s = StorefrontShell(FakeShopApi(products_error=NetworkError()), session)
    await s.load()
    assert s.products == []
    assert len(s.categories) == 3
    assert s.last_error == "Network error, try again"


async def test_category_transitions(shell):
    shell.select_category(CATEGORIES[1])
    assert shell.view == "category-results"
    assert [p.id for p in shell.visible_products()] == ["p1", "p3"]

    shell.back()
    shell.select_category(CATEGORIES[0])
    assert shell.view == "all-products"
    assert len(shell.visible_products()) == 4


async def test_search(shell):
    shell.search("spika")
    assert shell.view == "search-results"
    assert [p.id for p in shell.search_results()] == ["p1", "p3"]
    assert [c.name for c in shell.matching_categories()] == ["Spika"]

    shell.search("   ")
    assert shell.search_results() == []


async def test_product_detail_shows_related(shell):
    shell.open_product(PRODUCTS[0])
    assert shell.view == "product-detail"
    related = [p.id for p in shell.visible_products()]
    assert related[0] == "p3"
    assert "p1" not in related


async def test_navigation_and_banner(shell):
    shell.navigate("categories")
    assert shell.view == "categories"
    shell.open_banner()
    assert shell.view == "all-products"
    with pytest.raises(ValueError):
        shell.navigate("product-detail")


async def test_guest_asking_for_admin_gets_auth_prompt(shell):
    shell.navigate("admin")
    assert shell.view == "home"
    assert shell.auth_prompt
    shell.dismiss_auth()
    assert not shell.auth_prompt


async def test_login_opens_admin_and_logout_returns_home(shell, state_path):
    assert await shell.login("admin@sonko.tz", "bad") is False
    assert shell.last_error == "Invalid credentials"
    assert shell.user.is_guest

    shell.request_admin()
    assert await shell.login("admin@sonko.tz", "pw") is True
    assert shell.view == "admin"
    assert not shell.auth_prompt
    assert Session(LocalStore(state_path)).user.is_admin

    shell.logout()
    assert shell.view == "home"
    assert shell.user.is_guest


async def test_signed_in_customer_may_open_admin_but_not_write(shell, session):
    session.sign_in(CUSTOMER)
    assert shell.request_admin()
    assert shell.view == "admin"
    with pytest.raises(PermissionDeniedError):
        shell.open_product_form()
    assert await shell.add_product({"title": "x"}) is False
    assert shell.last_error == "Admin role required"


async def test_admin_adds_and_deletes_products(shell, session):
    session.sign_in(ADMIN)
    form = shell.open_product_form()
    form.state.title = "Redio"
    form.state.price = "20000"
    form.state.category = "Spika"
    form.state.images = ["https://cdn.example/r.jpg"]

    assert await form.submit(shell.add_product) is True
    assert shell.products[0].title == "Redio"
    assert form.state.title == ""

    assert await shell.delete_product("p2") is True
    assert "p2" not in [p.id for p in shell.products]


async def test_stats_are_zero_for_guests(shell, session):
    assert await shell.fetch_stats() == {"netSales": 0, "earnings": 0, "pageViews": 0, "totalOrders": 0}
    session.sign_in(CUSTOMER)
    assert (await shell.fetch_stats())["totalOrders"] == 1


async def test_guest_activity_is_recorded_and_capped(shell):
    shell.open_product(PRODUCTS[0])
    shell.search("mic")
    events = shell.activity.events()
    assert [e.type for e in events] == ["view_product", "search"]
    assert events[0].ref == "p1"

    for _ in range(60):
        shell.select_category(CATEGORIES[1])
    assert len(shell.activity) == 50


async def test_signed_in_users_are_not_tracked(shell, session):
    session.sign_in(ADMIN)
    shell.open_product(PRODUCTS[0])
    assert len(shell.activity) == 0


async def test_contact_links(shell):
    url = shell.whatsapp_url(PRODUCTS[0])
    assert url == "https://wa.me/255712345678?text=Habari%2C%20naomba%20kuagiza%3A%20Spika%20JBL"
    assert shell.call_url() == "tel:+255712345678"
    assert [e.type for e in shell.activity.events()] == ["click_whatsapp", "click_call"]


async def test_admin_edits_product_and_categories(shell, session):
    session.sign_in(ADMIN)
    shell.open_product(PRODUCTS[1])
    assert await shell.update_product("p2", {"title": "Mic Shure SM58"}) is True
    assert shell.products[1].title == "Mic Shure SM58"
    assert shell.selected_product.title == "Mic Shure SM58"

    assert await shell.add_category("Redio") is True
    assert [c.name for c in shell.categories] == ["Bidhaa Zote", "Mic", "Redio", "Spika"]
    assert await shell.add_category("mic") is False
    assert shell.last_error == "Category 'mic' already exists"

    shell.select_category(CATEGORIES[2])
    assert await shell.delete_category("c2") is True
    assert "c2" not in [c.id for c in shell.categories]
    assert shell.selected_category is None


@pytest.mark.parametrize("role, reason", [("guest", "Sign in to continue"), ("customer", "Admin role required")])
async def test_catalog_writes_are_gated(shell, session, role, reason):
    if role == "customer":
        session.sign_in(CUSTOMER)
    api = shell.api
    assert await shell.update_product("p1", {"title": "x"}) is False
    assert await shell.add_category("Redio") is False
    assert await shell.delete_category("c1") is False
    assert await shell.delete_product("p1") is False
    assert shell.last_error == reason
    assert api.deleted == []
    assert shell.products[0].title == "Spika JBL"
