import logging
import time
from typing import Any, Dict, Optional

import httpx

from config import Settings
from errors import PaymentGatewayError, ValidationError
from schemas import PaymentSessionResponse

logger = logging.getLogger("scan-and-go")

ORDER_CURRENCY = "INR"
COUNTRY_PREFIX = "+91"


def _build_order_payload(
    order_id: str, amount: float, phone: str, return_url: str
) -> Dict[str, Any]:
    return {
        "order_id": order_id,
        "order_amount": amount,
        "order_currency": ORDER_CURRENCY,
        "customer_details": {
            "customer_id": phone,
            "customer_phone": phone.replace(COUNTRY_PREFIX, ""),
        },
        "order_meta": {"return_url": return_url},
        "order_config": {
            "payment_methods": {
                "upi": True,
                "card": False,
                "netbanking": False,
                "wallet": False,
            },
        },
    }


class CashfreeGateway:
    """Creates Cashfree PG orders to obtain a payment session token."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-client-id": self._settings.cashfree_client_id or "",
            "x-client-secret": self._settings.cashfree_client_secret or "",
            "x-api-version": self._settings.cashfree_api_version,
        }

    async def create_payment_session(
        self, amount: Optional[float], phone: Optional[str]
    ) -> PaymentSessionResponse:
        if not amount or not phone:
            raise ValidationError("Amount & phone required")

        order_id = f"ORDER_{int(time.time() * 1000)}"
        url = f"{self._settings.cashfree_base_url.rstrip('/')}/pg/orders"
        payload = _build_order_payload(
            order_id, amount, phone, self._settings.cashfree_return_url
        )
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=payload, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Cashfree order creation failed (%s): %s",
                exc.response.status_code,
                exc.response.text,
            )
            raise PaymentGatewayError("Cashfree order creation failed") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Cashfree order creation failed: %s", exc)
            raise PaymentGatewayError("Cashfree order creation failed") from exc

        return PaymentSessionResponse(
            order_id=order_id,
            payment_session_id=data.get("payment_session_id"),
        )
