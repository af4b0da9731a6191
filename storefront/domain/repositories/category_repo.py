# storefront/domain/repositories/category_repo.py

from __future__ import annotations
from typing import Optional, List
import logging
import uuid

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from storefront.domain.models.category import Category, name_key

logger = logging.getLogger(__name__)


class CategoryExists(Exception):
    """A category with the same (case-insensitive) name already exists."""


class CategoryRepo:
    """
    Category repository backed by the 'categories' collection.
    `name_key` (casefolded name) carries the unique index.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "categories"):
        self.col = db[collection_name]

    async def list(self) -> List[Category]:
        cursor = self.col.find({}, {"_id": 0, "name_key": 0}).sort("name", 1)
        return [Category.model_validate(doc) async for doc in cursor]

    async def get(self, category_id: str) -> Optional[Category]:
        doc = await self.col.find_one({"id": category_id}, {"_id": 0, "name_key": 0})
        return Category.model_validate(doc) if doc else None

    async def get_by_name(self, name: str) -> Optional[Category]:
        doc = await self.col.find_one({"name_key": name_key(name)}, {"_id": 0, "name_key": 0})
        return Category.model_validate(doc) if doc else None

    async def insert(self, category: Category) -> Category:
        if await self.get_by_name(category.name):
            raise CategoryExists(category.name)
        try:
            await self.col.insert_one({**category.model_dump(), "name_key": name_key(category.name)})
        except DuplicateKeyError as e:
            # lost a race with a concurrent create
            raise CategoryExists(category.name) from e
        return category

    async def delete(self, category_id: str) -> bool:
        res = await self.col.delete_one({"id": category_id})
        return res.deleted_count > 0

    async def seed_defaults(self, defaults: List[dict]) -> int:
        """Insert `defaults` only when the collection is empty. Returns how many were inserted."""
        if await self.col.count_documents({}, limit=1):
            return 0
        inserted = 0
        for item in defaults:
            try:
                await self.insert(Category(id=uuid.uuid4().hex, **item))
                inserted += 1
            except CategoryExists:
                logger.debug("seed skipped existing category name=%s", item.get("name"))
        return inserted
