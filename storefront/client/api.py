"""
Async HTTP client for the storefront API.

Wraps httpx and turns every outcome into either the envelope's `data`
or one of the errors in storefront.client.errors. Nothing is retried.
"""
from __future__ import annotations

import io
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError

from storefront.client.errors import MalformedResponseError, NetworkError, ServerError
from storefront.core.config import get_settings
from storefront.domain.models.category import Category
from storefront.domain.models.product import Product
from storefront.domain.models.user import User

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class _ProgressReader(io.BytesIO):
    """In-memory file that reports how much of it has been read, in percent."""

    def __init__(self, data: bytes, on_progress: Optional[ProgressCallback]):
        super().__init__(data)
        self._total = len(data)
        self._on_progress = on_progress

    def read(self, size: int = -1) -> bytes:
        chunk = super().read(size)
        if self._on_progress and self._total:
            self._on_progress(min(100.0, self.tell() * 100.0 / self._total))
        return chunk


class StorefrontApi:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.STOREFRONT_API_URL,
            timeout=timeout or settings.http_timeout_s,
            transport=transport,
        )
        self._api = settings.api_prefix

    async def __aenter__(self) -> "StorefrontApi":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ----- plumbing -----------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send one request and return the decoded success envelope."""
        url = f"{self._api}{path}"
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s network error: %s", method, url, e)
            raise NetworkError() from e

        try:
            body = resp.json()
        except ValueError as e:
            logger.error("%s %s non-JSON response status=%s", method, url, resp.status_code)
            raise MalformedResponseError() from e
        if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
            logger.error("%s %s response without envelope status=%s", method, url, resp.status_code)
            raise MalformedResponseError()

        if not body["success"]:
            message = body.get("error") or f"Request failed ({resp.status_code})"
            logger.warning("%s %s failed status=%s error=%s", method, url, resp.status_code, message)
            raise ServerError(str(message), status_code=resp.status_code)
        return body

    @staticmethod
    def _parse(model, data):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error("malformed %s in response: %s", model.__name__, e)
            raise MalformedResponseError() from e

    # ----- catalog --------------------------------------------------------------

    async def list_products(self, category: Optional[str] = None) -> List[Product]:
        params = {"category": category} if category else None
        body = await self._request("GET", "/products", params=params)
        data = body.get("data")
        if not isinstance(data, list):
            raise MalformedResponseError()
        return [self._parse(Product, item) for item in data]

    async def get_product(self, product_id: str) -> Product:
        body = await self._request("GET", "/products", params={"id": product_id})
        return self._parse(Product, body.get("data"))

    async def create_product(self, payload: Dict[str, Any]) -> Product:
        body = await self._request("POST", "/products", json=payload)
        return self._parse(Product, body.get("data"))

    async def update_product(self, product_id: str, fields: Dict[str, Any]) -> Product:
        body = await self._request("PUT", "/products", params={"id": product_id}, json=fields)
        return self._parse(Product, body.get("data"))

    async def delete_product(self, product_id: str) -> bool:
        body = await self._request("DELETE", "/products", params={"id": product_id})
        return bool(body.get("deleted"))

    async def list_categories(self) -> List[Category]:
        body = await self._request("GET", "/categories")
        data = body.get("data")
        if not isinstance(data, list):
            raise MalformedResponseError()
        return [self._parse(Category, item) for item in data]

    async def create_category(self, name: str, icon: Optional[str] = None) -> Category:
        body = await self._request("POST", "/categories", json={"name": name, "icon": icon})
        return self._parse(Category, body.get("data"))

    async def delete_category(self, category_id: str) -> bool:
        body = await self._request("DELETE", "/categories", params={"id": category_id})
        return bool(body.get("deleted"))

    # ----- uploads --------------------------------------------------------------

    async def upload_file(
        self,
        name: str,
        content: bytes,
        content_type: Optional[str] = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Upload one file and return its public URL.
        `name` is the original file name; the server derives the unique key from it.
        `on_progress` receives the percentage of the body sent so far.
        """
        reader = _ProgressReader(content, on_progress)
        files = {"file": (name, reader, content_type or "application/octet-stream")}
        body = await self._request("POST", "/upload", params={"filename": name}, files=files)
        urls = body.get("data")
        if not isinstance(urls, list) or not urls or not isinstance(urls[0], str):
            raise MalformedResponseError()
        if on_progress:
            on_progress(100.0)
        return urls[0]

    # ----- auth & stats ---------------------------------------------------------

    async def login(self, email: str, password: str) -> User:
        body = await self._request("POST", "/login", json={"email": email, "password": password})
        return self._parse(User, body.get("user"))

    async def create_user(self, name: str, email: str, password: str, role: Optional[str] = None) -> User:
        payload = {"name": name, "email": email, "password": password, "role": role}
        body = await self._request("POST", "/auth/create-user", json=payload)
        return self._parse(User, body.get("user"))

    async def fetch_stats(self) -> Dict[str, Any]:
        body = await self._request("GET", "/stats")
        data = body.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError()
        return data
