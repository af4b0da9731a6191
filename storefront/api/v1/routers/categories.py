from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import uuid

from storefront.api.deps import category_repo_dep, product_repo_dep
from storefront.api.v1.schemas.envelope import ok
from storefront.domain.models.category import Category, CategoryIn
from storefront.domain.repositories.category_repo import CategoryExists

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
async def get_categories(
    id: Optional[str] = Query(None, description="Category id"),
    repo = Depends(category_repo_dep),
):
    if id:
        category = await repo.get(id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return ok(category.model_dump())
    categories = await repo.list()
    logger.info("Response: list_categories count=%s", len(categories))
    return ok([c.model_dump() for c in categories])


@router.post("", status_code=201)
async def create_category(
    body: CategoryIn,
    repo = Depends(category_repo_dep),
):
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Missing name")
    category = Category(id=uuid.uuid4().hex, name=name, icon=body.icon, image=body.image)
    try:
        await repo.insert(category)
    except CategoryExists:
        raise HTTPException(status_code=409, detail=f"Category '{name}' already exists")
    logger.info("category created id=%s name=%s", category.id, category.name)
    return ok(category.model_dump())


@router.delete("")
async def delete_category(
    id: Optional[str] = Query(None, description="Category id"),
    repo = Depends(category_repo_dep),
    products = Depends(product_repo_dep),
):
    """
    Refuse (409) while any product references the category, by id or by name.
    """
    if not id:
        raise HTTPException(status_code=400, detail="Missing ID")
    category = await repo.get(id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    in_use = await products.count_referencing(category.id, category.name)
    if in_use:
        logger.info("category delete refused id=%s name=%s products=%s", id, category.name, in_use)
        raise HTTPException(
            status_code=409,
            detail=f"Category '{category.name}' is used by {in_use} product(s)",
        )

    deleted = await repo.delete(id)
    logger.info("category delete id=%s deleted=%s", id, deleted)
    return ok(deleted=deleted)
