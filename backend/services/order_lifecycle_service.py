"""Order lifecycle: creation, payment claim, cashier verification and exit.

Status flow::

    pending_payment -> payment_claimed -> verified -> completed
                       payment_claimed -> rejected

``verify_order`` deliberately has no status guard: a cashier can re-verify or
reject any order, overwriting earlier verification stamps. Every call is
recorded in the verification log.
"""

import logging
import time
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, List, Optional, Tuple
from uuid import uuid4

from errors import ConflictError, IntegrityError, NotFoundError, ValidationError
from repositories.catalog_repository import CatalogStore
from repositories.order_repository import OrderRepository
from schemas import (
    PENDING_STATUSES,
    ExitDecision,
    Order,
    OrderItem,
    OrderItemRequest,
    OrderStatus,
    Store,
    UpiDetails,
    VerificationRecord,
)
from services.locks import KeyedLock

logger = logging.getLogger("scan-and-go")

TAX_RATE = Decimal("0.05")
ORDER_TTL = timedelta(minutes=10)
ANONYMOUS_CUSTOMER = "anonymous"
DEFAULT_CASHIER = "cashier"

EXIT_MESSAGES = {
    OrderStatus.PAYMENT_CLAIMED: "Payment not verified yet",
    OrderStatus.PENDING_PAYMENT: "Payment not completed",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_totals(items: Iterable[OrderItem]) -> Tuple[int, int, int]:
    subtotal = sum(item.item_total for item in items)
    tax = round_half_up(Decimal(subtotal) * TAX_RATE)
    return subtotal, tax, subtotal + tax


def generate_order_id() -> str:
    return f"ORD{int(time.time() * 1000)}{uuid4().hex[:6].upper()}"


def build_upi_details(store: Store, order: Order) -> UpiDetails:
    return UpiDetails(
        upi_id=store.upi_id,
        upi_qr_code=f"{store.upi_qr_code}&am={order.total}&tn={order.order_id}",
    )


class OrderLifecycleEngine:
    def __init__(
        self,
        catalog: CatalogStore,
        repository: OrderRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.catalog = catalog
        self.repository = repository
        self._clock = clock
        self._locks = KeyedLock()

    def _resolve_items(self, items: List[OrderItemRequest]) -> List[OrderItem]:
        resolved: List[OrderItem] = []
        for item in items:
            product = self.catalog.find_product(item.product_id)
            if product is None:
                raise IntegrityError(item.product_id)
            resolved.append(
                OrderItem(
                    **product.model_dump(),
                    quantity=item.quantity,
                    item_total=product.price * item.quantity,
                )
            )
        return resolved

    def _require_order(self, order_id: str) -> Order:
        order = self.repository.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def create_order(
        self,
        store_id: Optional[str],
        items: Optional[List[OrderItemRequest]],
        customer_phone: Optional[str] = None,
    ) -> Tuple[Order, Optional[UpiDetails]]:
        if not store_id or not items:
            raise ValidationError("Store ID and items required")

        order_items = self._resolve_items(items)
        subtotal, tax, total = compute_totals(order_items)
        now = self._clock()
        order = Order(
            order_id=generate_order_id(),
            store_id=store_id,
            customer_phone=customer_phone or ANONYMOUS_CUSTOMER,
            items=order_items,
            subtotal=subtotal,
            tax=tax,
            total=total,
            status=OrderStatus.PENDING_PAYMENT,
            created_at=now,
            expires_at=now + ORDER_TTL,
        )
        self.repository.insert(order)
        logger.info(
            "Order %s created for store %s (total=%s)", order.order_id, store_id, total
        )

        store = self.catalog.find_store(store_id)
        upi_details = build_upi_details(store, order) if store else None
        return order, upi_details

    def get_order(self, order_id: str) -> Order:
        return self._require_order(order_id)

    def claim_payment(
        self,
        order_id: str,
        utr_last4: Optional[str],
        paid_amount: Optional[float],
    ) -> Order:
        with self._locks.hold(order_id):
            order = self._require_order(order_id)
            if order.status != OrderStatus.PENDING_PAYMENT:
                raise ConflictError("Order already processed")
            order.status = OrderStatus.PAYMENT_CLAIMED
            order.payment_claimed_at = self._clock()
            order.utr_last4 = utr_last4
            order.paid_amount = paid_amount
            self.repository.update(order)
        logger.info("Order %s payment claimed (utr_last4=%s)", order_id, utr_last4)
        return order

    def verify_order(
        self,
        order_id: str,
        cashier_id: Optional[str],
        verified: bool,
        notes: Optional[str] = None,
    ) -> Tuple[Order, VerificationRecord]:
        cashier = cashier_id or DEFAULT_CASHIER
        with self._locks.hold(order_id):
            order = self._require_order(order_id)
            now = self._clock()
            if verified:
                order.status = OrderStatus.VERIFIED
                order.verified_at = now
                order.verified_by = cashier
                order.verification_notes = notes
            else:
                order.status = OrderStatus.REJECTED
                order.rejected_at = now
                order.rejected_by = cashier
                order.rejection_reason = notes
            # Log first: a failed append must leave the stored order untouched.
            record = self.repository.append_verification(
                VerificationRecord(
                    verification_id=str(uuid4()),
                    order_id=order_id,
                    cashier_id=cashier,
                    verified=verified,
                    notes=notes,
                    timestamp=now,
                )
            )
            self.repository.update(order)
        logger.info("Order %s %s by %s", order_id, order.status.value, cashier)
        return order, record

    def scan_exit(self, order_id: str) -> ExitDecision:
        with self._locks.hold(order_id):
            order = self._require_order(order_id)
            if order.status == OrderStatus.VERIFIED:
                order.status = OrderStatus.COMPLETED
                order.completed_at = self._clock()
                self.repository.update(order)
                logger.info("Order %s completed at exit", order_id)
                return ExitDecision(
                    allow_exit=True, message="Customer can exit", order=order
                )
        message = EXIT_MESSAGES.get(order.status, "Invalid order status")
        return ExitDecision(allow_exit=False, message=message, order=order)

    def list_pending_orders(self, store_id: Optional[str] = None) -> List[Order]:
        return self.repository.list_by_status(PENDING_STATUSES, store_id)
