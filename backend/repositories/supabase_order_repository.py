from typing import Any, Dict, Iterable, List, Optional

from repositories.order_repository import OrderRepository
from schemas import Order, OrderStatus, VerificationRecord

ORDERS_TABLE = "orders"
VERIFICATIONS_TABLE = "order_verifications"


def _to_record(model) -> Dict[str, Any]:
    return model.model_dump(mode="json")


class SupabaseOrderRepository(OrderRepository):
    """Orders and verification log persisted in Supabase tables.

    ``orders`` is keyed by ``order_id`` with ``items`` stored as JSON;
    ``order_verifications`` is keyed by ``verification_id``.
    """

    def __init__(self, client) -> None:
        self._client = client

    def insert(self, order: Order) -> Order:
        response = self._client.table(ORDERS_TABLE).insert(_to_record(order)).execute()
        if not response.data:
            raise RuntimeError(f"Failed to store order {order.order_id}")
        return order

    def find_by_id(self, order_id: str) -> Optional[Order]:
        response = (
            self._client.table(ORDERS_TABLE)
            .select("*")
            .eq("order_id", order_id)
            .limit(1)
            .execute()
        )
        items = response.data or []
        return Order.model_validate(items[0]) if items else None

    def update(self, order: Order) -> Order:
        record = _to_record(order)
        record.pop("order_id")
        response = (
            self._client.table(ORDERS_TABLE)
            .update(record)
            .eq("order_id", order.order_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update order {order.order_id}")
        return order

    def list_orders(self, store_id: Optional[str] = None) -> List[Order]:
        query = self._client.table(ORDERS_TABLE).select("*")
        if store_id:
            query = query.eq("store_id", store_id)
        response = query.order("created_at", desc=True).execute()
        return [Order.model_validate(row) for row in response.data or []]

    def list_by_status(
        self,
        statuses: Iterable[OrderStatus],
        store_id: Optional[str] = None,
    ) -> List[Order]:
        values = [OrderStatus(status).value for status in statuses]
        query = self._client.table(ORDERS_TABLE).select("*").in_("status", values)
        if store_id:
            query = query.eq("store_id", store_id)
        response = query.order("created_at", desc=True).execute()
        return [Order.model_validate(row) for row in response.data or []]

    def count(self) -> int:
        response = (
            self._client.table(ORDERS_TABLE).select("order_id", count="exact").execute()
        )
        return response.count or 0

    def append_verification(self, record: VerificationRecord) -> VerificationRecord:
        response = (
            self._client.table(VERIFICATIONS_TABLE).insert(_to_record(record)).execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to log verification for {record.order_id}")
        return record

    def list_verifications(
        self, order_id: Optional[str] = None
    ) -> List[VerificationRecord]:
        query = self._client.table(VERIFICATIONS_TABLE).select("*")
        if order_id:
            query = query.eq("order_id", order_id)
        response = query.order("timestamp").execute()
        return [VerificationRecord.model_validate(row) for row in response.data or []]
