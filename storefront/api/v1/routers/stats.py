from fastapi import APIRouter, Depends

from storefront.api.deps import order_repo_optional, redis_dep
from storefront.api.v1.schemas.envelope import ok
from storefront.domain.services.stats_svc import get_stats_svc

router = APIRouter(tags=["stats"])


@router.get("/stats", summary="Dashboard metrics (zeros when the store is unavailable)")
async def get_stats(
    orders = Depends(order_repo_optional),
    redis = Depends(redis_dep),
):
    return ok(await get_stats_svc(orders, redis))
