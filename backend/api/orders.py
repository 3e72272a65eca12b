import asyncio
from typing import Optional

from fastapi import APIRouter, Depends

from dependencies import get_engine
from schemas import (
    ClaimPaymentRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderActionResponse,
    OrderResponse,
)
from services.order_lifecycle_service import OrderLifecycleEngine

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("/create", response_model=CreateOrderResponse)
async def create_order(
    payload: CreateOrderRequest,
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> CreateOrderResponse:
    order, upi_details = await asyncio.to_thread(
        engine.create_order,
        payload.store_id,
        payload.items,
        payload.customer_phone,
    )
    return CreateOrderResponse(order=order, upi_details=upi_details)


@router.get("/{order_id}", response_model=OrderResponse)
async def read_order(
    order_id: str,
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    order = await asyncio.to_thread(engine.get_order, order_id)
    return OrderResponse(order=order)


@router.post("/{order_id}/claim-payment", response_model=OrderActionResponse)
async def claim_payment(
    order_id: str,
    payload: Optional[ClaimPaymentRequest] = None,
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderActionResponse:
    payload = payload or ClaimPaymentRequest()
    order = await asyncio.to_thread(
        engine.claim_payment,
        order_id,
        payload.utr_last4,
        payload.paid_amount,
    )
    return OrderActionResponse(
        message="Payment claimed. Awaiting verification.",
        order=order,
    )
