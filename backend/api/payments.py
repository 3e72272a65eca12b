from fastapi import APIRouter, Depends

from dependencies import get_gateway
from schemas import PaymentSessionRequest, PaymentSessionResponse
from services.payment_gateway_service import CashfreeGateway

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/create-order", response_model=PaymentSessionResponse)
async def create_payment_session(
    payload: PaymentSessionRequest,
    gateway: CashfreeGateway = Depends(get_gateway),
) -> PaymentSessionResponse:
    return await gateway.create_payment_session(payload.amount, payload.phone)
