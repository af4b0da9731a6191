"""
Storefront view state: which screen is shown and what it lists.

Transitions are plain local assignments triggered by user actions; the
only remote calls are the initial catalog load and the admin actions.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Literal, Optional
from urllib.parse import quote

from storefront.client.activity import ActivityType, GuestActivityLog
from storefront.client.api import StorefrontApi
from storefront.client.errors import PermissionDeniedError, StorefrontError
from storefront.client.product_form import ProductForm
from storefront.client.session import Action, AuthDecision, Session, authorize
from storefront.client.uploader import UploadOrchestrator
from storefront.core.config import get_settings
from storefront.domain.models.category import Category
from storefront.domain.models.product import Product
from storefront.domain.services.constants import ALL_PRODUCTS_CATEGORY, ZERO_STATS

logger = logging.getLogger(__name__)

View = Literal[
    "home", "admin", "product-detail", "category-results",
    "categories", "search-results", "all-products",
]
NAV_VIEWS = ("home", "categories", "search-results", "all-products", "admin")

HOME_GRID_SIZE = 10
FLASH_SALE_SIZE = 5
RELATED_SIZE = 6
ORDER_MESSAGE = "Habari, naomba kuagiza: "


class StorefrontShell:
    def __init__(
        self,
        api: StorefrontApi,
        session: Session,
        activity: Optional[GuestActivityLog] = None,
        *,
        phone_number: Optional[str] = None,
    ):
        self.api = api
        self.session = session
        self.activity = activity or GuestActivityLog()
        self.phone_number = phone_number or get_settings().SHOP_PHONE_NUMBER

        self.view: View = "home"
        self.products: List[Product] = []
        self.categories: List[Category] = []
        self.selected_product: Optional[Product] = None
        self.selected_category: Optional[Category] = None
        self.search_query = ""
        self.auth_prompt = False
        self.last_error: Optional[str] = None

    @property
    def user(self):
        return self.session.user

    def _track(self, type: ActivityType, ref: str = "") -> None:
        if self.user.is_guest:
            self.activity.record(type, ref)

    # ----- loading ------------------------------------------------------------

    async def load(self) -> None:
        """Fetch products and categories together; a failed half stays empty."""
        products, categories = await asyncio.gather(
            self.api.list_products(), self.api.list_categories(), return_exceptions=True,
        )
        if isinstance(products, StorefrontError):
            logger.error("initial products load failed: %s", products.user_message)
            self.last_error = products.user_message
        elif isinstance(products, BaseException):
            raise products
        else:
            self.products = products

        if isinstance(categories, StorefrontError):
            logger.error("initial categories load failed: %s", categories.user_message)
            self.last_error = categories.user_message
        elif isinstance(categories, BaseException):
            raise categories
        else:
            self.categories = categories

    # ----- transitions --------------------------------------------------------

    def select_category(self, category: Category) -> None:
        self._track("view_category", category.id)
        if category.name == ALL_PRODUCTS_CATEGORY:
            self.view = "all-products"
            return
        self.selected_category = category
        self.view = "category-results"

    def search(self, query: str) -> None:
        self.search_query = query
        self._track("search", query.strip())
        self.view = "search-results"

    def open_product(self, product: Product) -> None:
        self._track("view_product", product.id)
        self.selected_product = product
        self.view = "product-detail"

    def open_banner(self) -> None:
        self.view = "all-products"

    def back(self) -> None:
        self.view = "home"

    def navigate(self, view: View) -> None:
        """Bottom-nav tap."""
        if view not in NAV_VIEWS:
            raise ValueError(f"not a navigation target: {view}")
        if view == "admin":
            self.request_admin()
            return
        self.view = view

    def request_admin(self) -> AuthDecision:
        decision = authorize(self.user, Action.OPEN_ADMIN)
        if decision:
            self.view = "admin"
        else:
            self.auth_prompt = True
        return decision

    def dismiss_auth(self) -> None:
        self.auth_prompt = False

    async def login(self, email: str, password: str) -> bool:
        try:
            user = await self.api.login(email, password)
        except StorefrontError as e:
            self.last_error = e.user_message
            return False
        self.session.sign_in(user)
        self.auth_prompt = False
        self.last_error = None
        self.view = "admin"
        return True

    def logout(self) -> None:
        self.session.sign_out()
        self.view = "home"

    # ----- what the current view shows ---------------------------------------

    def search_results(self) -> List[Product]:
        q = self.search_query.strip().lower()
        if not q:
            return []
        return [
            p for p in self.products
            if q in p.title.lower() or q in (p.category or "").lower()
        ]

    def matching_categories(self) -> List[Category]:
        q = self.search_query.strip().lower()
        return [c for c in self.categories if q in c.name.lower()]

    def category_products(self) -> List[Product]:
        cat = self.selected_category
        if cat is None:
            return []
        return [
            p for p in self.products
            if p.category_id == cat.id or (p.category or "").lower() == cat.name.lower()
        ]

    def flash_sale(self) -> List[Product]:
        return self.products[:FLASH_SALE_SIZE]

    def visible_products(self) -> List[Product]:
        if self.view == "home":
            return self.products[:HOME_GRID_SIZE]
        if self.view in ("all-products", "categories", "admin"):
            return list(self.products)
        if self.view == "category-results":
            return self.category_products()
        if self.view == "search-results":
            return self.search_results()
        if self.view == "product-detail" and self.selected_product:
            return self.related_products(self.selected_product)
        return []

    def related_products(self, product: Product, limit: int = RELATED_SIZE) -> List[Product]:
        same = [p for p in self.products if p.id != product.id and p.category == product.category]
        others = [p for p in self.products if p.id != product.id and p.category != product.category]
        return (same + others)[:limit]

    # ----- contact links ------------------------------------------------------

    def whatsapp_url(self, product: Product) -> str:
        self._track("click_whatsapp", product.id)
        number = self.phone_number.lstrip("+")
        return f"https://wa.me/{number}?text={quote(ORDER_MESSAGE + product.title)}"

    def call_url(self) -> str:
        self._track("click_call", self.selected_product.id if self.selected_product else "")
        return f"tel:{self.phone_number}"

    # ----- admin --------------------------------------------------------------

    def _require(self, action: Action) -> None:
        decision = authorize(self.user, action)
        if not decision:
            raise PermissionDeniedError(decision.reason)

    def open_product_form(self) -> ProductForm:
        self._require(Action.CREATE_PRODUCT)
        return ProductForm()

    def uploader_for(self, form: ProductForm, on_progress=None) -> UploadOrchestrator:
        return UploadOrchestrator(self.api, form, user=self.user, on_progress=on_progress)

    async def add_product(self, payload: dict) -> bool:
        """`create_product` collaborator for ProductForm.submit."""
        decision = authorize(self.user, Action.CREATE_PRODUCT)
        if not decision:
            self.last_error = decision.reason
            return False
        try:
            product = await self.api.create_product(payload)
        except StorefrontError as e:
            self.last_error = e.user_message
            return False
        self.products = [product] + self.products
        return True

    async def delete_product(self, product_id: str) -> bool:
        decision = authorize(self.user, Action.DELETE_PRODUCT)
        if not decision:
            self.last_error = decision.reason
            return False
        try:
            deleted = await self.api.delete_product(product_id)
        except StorefrontError as e:
            self.last_error = e.user_message
            return False
        self.products = [p for p in self.products if p.id != product_id]
        return deleted

    async def update_product(self, product_id: str, fields: dict) -> bool:
        decision = authorize(self.user, Action.UPDATE_PRODUCT)
        if not decision:
            self.last_error = decision.reason
            return False
        try:
            updated = await self.api.update_product(product_id, fields)
        except StorefrontError as e:
            self.last_error = e.user_message
            return False
        self.products = [updated if p.id == product_id else p for p in self.products]
        if self.selected_product and self.selected_product.id == product_id:
            self.selected_product = updated
        return True

    async def add_category(self, name: str, icon: Optional[str] = None) -> bool:
        decision = authorize(self.user, Action.CREATE_CATEGORY)
        if not decision:
            self.last_error = decision.reason
            return False
        try:
            category = await self.api.create_category(name, icon)
        except StorefrontError as e:
            self.last_error = e.user_message
            return False
        self.categories = sorted(self.categories + [category], key=lambda c: c.name)
        return True

    async def delete_category(self, category_id: str) -> bool:
        """Refused by the API (409) while products still use the category."""
        decision = authorize(self.user, Action.DELETE_CATEGORY)
        if not decision:
            self.last_error = decision.reason
            return False
        try:
            deleted = await self.api.delete_category(category_id)
        except StorefrontError as e:
            self.last_error = e.user_message
            return False
        self.categories = [c for c in self.categories if c.id != category_id]
        if self.selected_category and self.selected_category.id == category_id:
            self.selected_category = None
        return deleted

    async def fetch_stats(self) -> Dict[str, float]:
        decision = authorize(self.user, Action.VIEW_STATS)
        if not decision:
            return dict(ZERO_STATS)
        try:
            return await self.api.fetch_stats()
        except StorefrontError as e:
            self.last_error = e.user_message
            return dict(ZERO_STATS)
