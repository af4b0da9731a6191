# storefront/domain/services/catalog_svc.py
"""
Catalog rules shared by the product endpoints:
required fields, main image selection, original price derivation and patch merging.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from storefront.domain.models.product import Product, ProductFields
from storefront.domain.services.constants import DEFAULT_RATING, STATUS_ONLINE
from storefront.domain.services.pricing import compute_original_price

logger = logging.getLogger(__name__)


class CatalogValidationError(ValueError):
    """Invalid product input; the message is shown to the caller as-is."""


def pick_main_image(images: List[str]) -> Optional[str]:
    """First gallery image; the last one when the first slot is empty."""
    if not images:
        return None
    return images[0] or images[-1] or None


def new_product(fields: ProductFields, *, now: Optional[datetime] = None) -> Product:
    now = now or datetime.now(timezone.utc)

    images = list(fields.images or [])
    if not images and fields.image:
        images = [fields.image]
    image = fields.image or pick_main_image(images)

    if not fields.title or not fields.title.strip():
        raise CatalogValidationError("Missing title")
    if not image:
        raise CatalogValidationError("Missing image")
    if fields.price is None or fields.price <= 0:
        raise CatalogValidationError("Missing or invalid price")

    # derived, never taken from the request
    original_price = compute_original_price(fields.price, fields.discount)
    return Product(
        id=uuid.uuid4().hex,
        title=fields.title.strip(),
        description=fields.description,
        image=image,
        images=images,
        description_images=fields.description_images or [],
        video_url=fields.video_url,
        price=fields.price,
        original_price=original_price,
        discount=fields.discount,
        category=fields.category,
        category_id=fields.category_id,
        status=fields.status or STATUS_ONLINE,
        sold_count=fields.sold_count or 0,
        order_count=fields.order_count or 0,
        rating=fields.rating if fields.rating is not None else DEFAULT_RATING,
        created_at=fields.created_at or now,
        updated_at=now,
    )


def merge_patch(existing: Product, fields: ProductFields) -> dict:
    """
    Turn a partial update into the `$set` document for the repository.
    Only fields present in the request are touched. `image` follows the
    gallery unless given explicitly; `original_price` is always derived
    from the effective price and discount.
    """
    patch = fields.model_dump(exclude_unset=True)
    patch.pop("created_at", None)

    if "title" in patch:
        if not patch["title"] or not patch["title"].strip():
            raise CatalogValidationError("Missing title")
        patch["title"] = patch["title"].strip()
    if "price" in patch and (patch["price"] is None or patch["price"] <= 0):
        raise CatalogValidationError("Missing or invalid price")
    for f in ("status", "sold_count", "order_count", "rating"):
        if f in patch and patch[f] is None:
            patch.pop(f)

    if "images" in patch:
        patch["images"] = patch["images"] or []
        if "image" not in patch:
            patch["image"] = pick_main_image(patch["images"]) or existing.image
    if "image" in patch and not patch["image"]:
        raise CatalogValidationError("Missing image")

    if {"price", "discount", "original_price"} & patch.keys():
        price = patch.get("price", existing.price)
        discount = patch["discount"] if "discount" in patch else existing.discount
        patch["original_price"] = compute_original_price(price, discount)

    # validate the merged result before it reaches the store
    try:
        Product.model_validate({**existing.model_dump(), **patch})
    except ValidationError as e:
        raise CatalogValidationError(str(e.errors()[0].get("msg", "Invalid product"))) from e
    logger.debug("product patch id=%s fields=%s", existing.id, sorted(patch))
    return patch
