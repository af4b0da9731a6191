# storefront/domain/repositories/product_repo.py

from __future__ import annotations
from typing import Optional, List
from datetime import datetime, timezone
import json

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from storefront.domain.models.product import Product, LIST_FIELDS

class ProductRepo:
    """
    Product repository backed by the 'products' collection.
    Documents use snake_case keys; `images` and `description_images` are
    stored as JSON text and parsed back by `Product.from_document`.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]

    async def list(self, category: Optional[str] = None) -> List[Product]:
        filt = {"category": category} if category else {}
        cursor = self.col.find(filt, {"_id": 0}).sort("created_at", -1)
        return [Product.from_document(doc) async for doc in cursor]

    async def get(self, product_id: str) -> Optional[Product]:
        doc = await self.col.find_one({"id": product_id}, {"_id": 0})
        return Product.from_document(doc) if doc else None

    async def insert(self, product: Product) -> Product:
        await self.col.insert_one(product.to_document())
        return product

    async def update(self, product_id: str, fields: dict) -> Optional[Product]:
        """
        Partial patch. `updated_at` is always refreshed.
        Returns the updated product, or None if the id is unknown.
        """
        patch = dict(fields)
        for f in LIST_FIELDS:
            if f in patch:
                patch[f] = json.dumps(patch[f] or [])
        patch["updated_at"] = datetime.now(timezone.utc)
        doc = await self.col.find_one_and_update(
            {"id": product_id},
            {"$set": patch},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        return Product.from_document(doc) if doc else None

    async def delete(self, product_id: str) -> bool:
        res = await self.col.delete_one({"id": product_id})
        return res.deleted_count > 0

    async def count_referencing(self, category_id: str, category_name: str) -> int:
        """Products pointing at a category, by id or by name."""
        return await self.col.count_documents(
            {"$or": [{"category_id": category_id}, {"category": category_name}]}
        )
