from .analytics import router as analytics_router
from .cashier import router as cashier_router
from .orders import router as orders_router
from .payments import router as payments_router
from .products import router as products_router
from .stores import router as stores_router

__all__ = [
    "analytics_router",
    "cashier_router",
    "orders_router",
    "payments_router",
    "products_router",
    "stores_router",
]
