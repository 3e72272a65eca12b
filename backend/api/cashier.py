import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from dependencies import get_engine
from schemas import (
    OrderListResponse,
    ScanExitRequest,
    ScanExitResponse,
    VerifyOrderRequest,
    VerifyOrderResponse,
)
from services.order_lifecycle_service import OrderLifecycleEngine

router = APIRouter(prefix="/api/cashier", tags=["cashier"])


@router.get("/pending-orders", response_model=OrderListResponse)
async def list_pending_orders(
    store_id: Optional[str] = Query(default=None, alias="storeId"),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderListResponse:
    orders = await asyncio.to_thread(engine.list_pending_orders, store_id)
    return OrderListResponse(orders=orders, count=len(orders))


@router.post("/verify-order", response_model=VerifyOrderResponse)
async def verify_order(
    payload: VerifyOrderRequest,
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> VerifyOrderResponse:
    order, record = await asyncio.to_thread(
        engine.verify_order,
        payload.order_id,
        payload.cashier_id,
        payload.verified,
        payload.notes,
    )
    message = "Order verified successfully" if payload.verified else "Order rejected"
    return VerifyOrderResponse(message=message, order=order, verification=record)


@router.post("/scan-exit-qr", response_model=ScanExitResponse)
async def scan_exit(
    payload: ScanExitRequest,
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> ScanExitResponse:
    decision = await asyncio.to_thread(engine.scan_exit, payload.order_id)
    return ScanExitResponse(
        success=decision.allow_exit,
        message=decision.message,
        allow_exit=decision.allow_exit,
        order=decision.order,
    )
