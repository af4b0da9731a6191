# storefront/api/v1/routers/health.py
import time

from fastapi import APIRouter, Response

from storefront.core.config import get_settings
from storefront.db import mongo
from storefront.db.redis import get_redis

router = APIRouter(tags=["health"])
START_TIME = time.time()


async def _mongo_check() -> dict:
    db = mongo.get_db_or_none()
    if db is None:
        return {"status": "unavailable"}
    try:
        await db.command("ping")
        return {
            "status": "ok",
            "products": await db["products"].estimated_document_count(),
            "categories": await db["categories"].estimated_document_count(),
            "uploads_bucket": get_settings().uploads_bucket,
        }
    except Exception as e:
        return {"status": f"error: {e}"}


async def _redis_check() -> str:
    r = get_redis()
    if r is None:
        return "skipped"
    try:
        await r.ping()
        return "ok"
    except Exception as e:
        return f"error: {e}"


@router.get("/health")
async def health(response: Response):
    """
    Liveness + catalog readiness.
    The store (catalog, users, uploads) must answer; Redis only backs
    the stats cache and page views, so 'skipped' is healthy.
    """
    settings = get_settings()
    store = await _mongo_check()
    cache = await _redis_check()

    healthy = store["status"] == "ok" and cache in ("ok", "skipped")
    if not healthy:
        response.status_code = 503
    return {
        "status": "ok" if healthy else "degraded",
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "version": settings.GIT_SHA,
        "uptime_seconds": int(time.time() - START_TIME),
        "checks": {"store": store, "redis": cache},
    }
