import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from dependencies import get_repository
from repositories.order_repository import OrderRepository
from schemas import AnalyticsResponse
from services.analytics_service import compute_dashboard

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=AnalyticsResponse)
async def read_dashboard(
    store_id: Optional[str] = Query(default=None, alias="storeId"),
    repository: OrderRepository = Depends(get_repository),
) -> AnalyticsResponse:
    analytics = await asyncio.to_thread(compute_dashboard, repository, store_id)
    return AnalyticsResponse(analytics=analytics)
