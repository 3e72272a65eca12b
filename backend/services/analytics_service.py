from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from repositories.order_repository import OrderRepository
from schemas import PENDING_STATUSES, DashboardAnalytics, OrderStatus
from services.order_lifecycle_service import round_half_up


def compute_dashboard(
    repository: OrderRepository,
    store_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> DashboardAnalytics:
    today = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date()
    orders = repository.list_orders(store_id)

    today_orders = [
        o for o in orders if o.created_at.astimezone(timezone.utc).date() == today
    ]
    completed = [o for o in orders if o.status == OrderStatus.COMPLETED]
    pending = [o for o in orders if o.status in PENDING_STATUSES]

    total_revenue = sum(o.total for o in completed)
    today_revenue = sum(
        o.total for o in today_orders if o.status == OrderStatus.COMPLETED
    )
    average = (
        round_half_up(Decimal(total_revenue) / len(completed)) if completed else 0
    )

    return DashboardAnalytics(
        total_orders=len(orders),
        today_orders=len(today_orders),
        completed_orders=len(completed),
        pending_orders=len(pending),
        total_revenue=total_revenue,
        today_revenue=today_revenue,
        average_order_value=average,
    )
