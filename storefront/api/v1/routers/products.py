# storefront/api/v1/routers/products.py

from fastapi import APIRouter, Depends, Query, HTTPException
from typing import Optional
import time

from storefront.api.deps import product_repo_dep, category_repo_dep, redis_dep
from storefront.api.v1.schemas.envelope import ok
from storefront.core.config import get_settings
from storefront.domain.models.product import ProductFields
from storefront.domain.services.catalog_svc import CatalogValidationError, new_product, merge_patch
from storefront.utils.cache import counter_incr

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


async def _resolve_category(fields: ProductFields, categories) -> None:
    """Fill whichever half of the (category, category_id) pair is missing."""
    try:
        if fields.category and not fields.category_id:
            cat = await categories.get_by_name(fields.category)
            if cat:
                fields.category_id = cat.id
        elif fields.category_id and not fields.category:
            cat = await categories.get(fields.category_id)
            if cat:
                fields.category = cat.name
    except Exception as e:
        # the category reference is informative only; keep what the client sent
        logger.warning("category lookup failed category=%s id=%s err=%s", fields.category, fields.category_id, e)


@router.get("", summary="List products, or fetch one with ?id=")
async def get_products(
    id: Optional[str] = Query(None, description="Product id"),
    category: Optional[str] = Query(None, description="Filter by category name"),
    repo = Depends(product_repo_dep),
    redis = Depends(redis_dep),
):
    if id:
        product = await repo.get(id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        # single-product reads are the storefront's page views
        await counter_incr(redis, get_settings().page_views_key)
        return ok(product.to_wire())

    t0 = time.perf_counter()
    products = await repo.list(category=category)
    logger.info("Response: list_products category=%s count=%s in %.4fs", category, len(products), time.perf_counter() - t0)
    return ok([p.to_wire() for p in products])


@router.post("", status_code=201, summary="Create a product (camelCase or snake_case fields)")
async def create_product(
    body: ProductFields,
    repo = Depends(product_repo_dep),
    categories = Depends(category_repo_dep),
):
    try:
        await _resolve_category(body, categories)
        product = new_product(body)
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await repo.insert(product)
    logger.info("product created id=%s title=%s price=%s images=%s", product.id, product.title, product.price, len(product.images))
    return ok(product.to_wire())


@router.put("", summary="Partially update a product")
async def update_product(
    body: ProductFields,
    id: Optional[str] = Query(None, description="Product id"),
    repo = Depends(product_repo_dep),
    categories = Depends(category_repo_dep),
):
    if not id:
        raise HTTPException(status_code=400, detail="Missing ID")
    existing = await repo.get(id)
    if not existing:
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        if "category" in body.model_fields_set or "category_id" in body.model_fields_set:
            await _resolve_category(body, categories)
        patch = merge_patch(existing, body)
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    updated = await repo.update(id, patch)
    if not updated:
        # deleted between read and write
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("product updated id=%s fields=%s", id, sorted(patch))
    return ok(updated.to_wire())


@router.delete("", summary="Delete a product")
async def delete_product(
    id: Optional[str] = Query(None, description="Product id"),
    repo = Depends(product_repo_dep),
):
    if not id:
        raise HTTPException(status_code=400, detail="Missing ID")
    deleted = await repo.delete(id)
    logger.info("product delete id=%s deleted=%s", id, deleted)
    return ok(deleted=deleted)
