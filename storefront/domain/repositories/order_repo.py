# storefront/domain/repositories/order_repo.py

from __future__ import annotations
from typing import Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from storefront.domain.services.constants import ORDER_STATUS_COMPLETED


class OrderRepo:
    """Read-only view of the 'orders' collection used by the dashboard."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "orders"):
        self.col = db[collection_name]

    async def completed_summary(self) -> Dict[str, Any]:
        """{"net_sales": float, "total_orders": int} over completed orders."""
        pipeline = [
            {"$match": {"status": ORDER_STATUS_COMPLETED}},
            {"$group": {"_id": None, "net_sales": {"$sum": "$total"}, "total_orders": {"$sum": 1}}},
        ]
        docs = [d async for d in self.col.aggregate(pipeline)]
        if not docs:
            return {"net_sales": 0.0, "total_orders": 0}
        return {
            "net_sales": float(docs[0].get("net_sales") or 0),
            "total_orders": int(docs[0].get("total_orders") or 0),
        }
