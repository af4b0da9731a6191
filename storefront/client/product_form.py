"""
Admin "add product" form: state, validation and the outgoing payload.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from storefront.client.errors import FormValidationError, UploadInProgressError
from storefront.client.uploader import MediaKind, UploadTracker
from storefront.domain.models.product import ProductFields, dual_case_dump
from storefront.domain.services.catalog_svc import pick_main_image
from storefront.domain.services.constants import (
    DEFAULT_RATING,
    MAX_DESCRIPTION_IMAGES,
    MAX_GALLERY_IMAGES,
    STATUS_ONLINE,
)
from storefront.domain.services.pricing import compute_original_price

logger = logging.getLogger(__name__)

CreateProduct = Callable[[dict], Awaitable[bool]]


@dataclass
class ProductFormState:
    title: str = ""
    price: str = ""                   # raw text from the input
    discount: str = ""                # raw text, optional
    category: str = ""
    category_id: Optional[str] = None
    description: str = ""
    images: List[str] = field(default_factory=list)
    description_images: List[str] = field(default_factory=list)
    video_url: Optional[str] = None


def _parse_number(text) -> Optional[float]:
    if text is None:
        return None
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        cleaned = str(text).strip().replace(",", "").replace(" ", "")
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def build_payload(state: ProductFormState, now: Optional[datetime] = None) -> dict:
    """
    Validate `state` and return the create-product payload.
    Raises FormValidationError; never does I/O.
    """
    title = state.title.strip()
    if not title:
        raise FormValidationError("Title is required")

    price = _parse_number(state.price)
    if price is None or price <= 0:
        raise FormValidationError("Price must be a positive number")

    images = list(state.images)
    if not any(images):
        raise FormValidationError("Add at least one image")

    if not state.category.strip():
        raise FormValidationError("Select a category")

    discount: Optional[int] = None
    if str(state.discount).strip():
        value = _parse_number(state.discount)
        if value is None or not 0 <= value <= 100:
            raise FormValidationError("Discount must be between 0 and 100")
        discount = int(value)          # whole percent, fraction dropped

    fields = ProductFields(
        title=title,
        description=state.description.strip() or None,
        image=pick_main_image(images),
        images=images,
        description_images=list(state.description_images),
        video_url=state.video_url or None,
        price=price,
        original_price=compute_original_price(price, discount),
        discount=discount,
        category=state.category.strip(),
        category_id=state.category_id,
        status=STATUS_ONLINE,
        sold_count=0,
        order_count=0,
        rating=DEFAULT_RATING,
        created_at=now or datetime.now(timezone.utc),
    )
    return dual_case_dump(fields, exclude_none=True)


class ProductForm:
    """One open "add product" session. Discard it on close/cancel."""

    def __init__(self, state: Optional[ProductFormState] = None):
        self.state = state or ProductFormState()
        self.uploads = UploadTracker()

    @property
    def uploading(self) -> bool:
        """True while any upload batch runs; upload and submit controls are disabled."""
        return self.uploads.busy

    def add_media(self, kind: MediaKind, url: str) -> None:
        if kind == "image":
            self.state.images = (self.state.images + [url])[:MAX_GALLERY_IMAGES]
        elif kind == "desc_image":
            self.state.description_images = (self.state.description_images + [url])[:MAX_DESCRIPTION_IMAGES]
        elif kind == "video":
            self.state.video_url = url
        else:
            raise ValueError(f"unknown media kind: {kind}")

    def remove_image(self, url: str) -> None:
        self.state.images = [u for u in self.state.images if u != url]

    def reset(self) -> None:
        self.state = ProductFormState()

    def build_payload(self, now: Optional[datetime] = None) -> dict:
        return build_payload(self.state, now=now)

    async def submit(self, create_product: CreateProduct) -> bool:
        """
        Validate, hand the payload to `create_product` and report its result.
        The form is cleared only when creation is confirmed.
        """
        if self.uploading:
            raise UploadInProgressError()
        payload = self.build_payload()
        ok = await create_product(payload)
        if ok:
            logger.info("product submitted title=%s", payload.get("title"))
            self.reset()
        else:
            logger.warning("product submit rejected title=%s", payload.get("title"))
        return ok
