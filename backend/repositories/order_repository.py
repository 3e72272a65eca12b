import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from schemas import Order, OrderStatus, VerificationRecord


class OrderRepository(ABC):
    """Storage for orders and the cashier verification log.

    Implementations hand out detached copies: mutating a returned order has no
    effect until it is written back with ``update``.
    """

    @abstractmethod
    def insert(self, order: Order) -> Order: ...

    @abstractmethod
    def find_by_id(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def update(self, order: Order) -> Order: ...

    @abstractmethod
    def list_orders(self, store_id: Optional[str] = None) -> List[Order]: ...

    @abstractmethod
    def list_by_status(
        self,
        statuses: Iterable[OrderStatus],
        store_id: Optional[str] = None,
    ) -> List[Order]: ...

    @abstractmethod
    def append_verification(self, record: VerificationRecord) -> VerificationRecord: ...

    @abstractmethod
    def list_verifications(
        self, order_id: Optional[str] = None
    ) -> List[VerificationRecord]: ...

    def count(self) -> int:
        return len(self.list_orders())


def newest_first(orders: List[Order]) -> List[Order]:
    # Reversed insertion order keeps same-timestamp orders newest-first too.
    return sorted(reversed(orders), key=lambda o: o.created_at, reverse=True)


class InMemoryOrderRepository(OrderRepository):
    """Volatile, process-local storage."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._orders: Dict[str, Order] = {}
        self._verifications: List[VerificationRecord] = []

    def insert(self, order: Order) -> Order:
        with self._lock:
            if order.order_id in self._orders:
                raise KeyError(f"Order {order.order_id} already exists")
            self._orders[order.order_id] = order.model_copy(deep=True)
        return order

    def find_by_id(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return order.model_copy(deep=True) if order else None

    def update(self, order: Order) -> Order:
        with self._lock:
            if order.order_id not in self._orders:
                raise KeyError(f"Order {order.order_id} does not exist")
            self._orders[order.order_id] = order.model_copy(deep=True)
        return order

    def list_orders(self, store_id: Optional[str] = None) -> List[Order]:
        with self._lock:
            orders = [o.model_copy(deep=True) for o in self._orders.values()]
        if store_id:
            orders = [o for o in orders if o.store_id == store_id]
        return orders

    def list_by_status(
        self,
        statuses: Iterable[OrderStatus],
        store_id: Optional[str] = None,
    ) -> List[Order]:
        wanted = set(statuses)
        orders = [o for o in self.list_orders(store_id) if o.status in wanted]
        return newest_first(orders)

    def append_verification(self, record: VerificationRecord) -> VerificationRecord:
        with self._lock:
            self._verifications.append(record)
        return record

    def list_verifications(
        self, order_id: Optional[str] = None
    ) -> List[VerificationRecord]:
        with self._lock:
            records = list(self._verifications)
        if order_id:
            records = [r for r in records if r.order_id == order_id]
        return records

    def count(self) -> int:
        with self._lock:
            return len(self._orders)
