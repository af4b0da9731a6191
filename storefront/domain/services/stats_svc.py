import logging
import time
from typing import Any, Dict

from storefront.core.config import get_settings
from storefront.domain.services.constants import EARNINGS_RATIO, ZERO_STATS
from storefront.utils.cache import cache_get, cache_set, counter_get

logger = logging.getLogger(__name__)


async def get_stats_svc(order_repo, redis) -> Dict[str, Any]:
    """
    Dashboard metrics. Never raises: any failure degrades to zeros.
    Cached in Redis for `stats_cache_ttl` seconds when Redis is available.
    """
    t0 = time.perf_counter()
    settings = get_settings()

    cached = await cache_get(redis, settings.stats_cache_key)
    if isinstance(cached, dict) and set(ZERO_STATS) <= set(cached):
        logger.info("stats cache_hit key=%s", settings.stats_cache_key)
        return cached

    try:
        if order_repo is None:
            raise RuntimeError("order store unavailable")
        summary = await order_repo.completed_summary()
        net_sales = summary["net_sales"]
        data = {
            "netSales": net_sales,
            "earnings": int(net_sales * EARNINGS_RATIO),
            "pageViews": await counter_get(redis, settings.page_views_key),
            "totalOrders": summary["total_orders"],
        }
    except Exception as e:
        logger.warning("stats fallback to zeros err=%s", e)
        return dict(ZERO_STATS)

    await cache_set(redis, settings.stats_cache_key, data, ex=settings.stats_cache_ttl)
    logger.info("stats done orders=%s time=%.3fs", data["totalOrders"], time.perf_counter() - t0)
    return data
