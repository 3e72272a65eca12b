from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    PAYMENT_CLAIMED = "payment_claimed"
    VERIFIED = "verified"
    REJECTED = "rejected"
    COMPLETED = "completed"


PENDING_STATUSES = frozenset(
    {OrderStatus.PENDING_PAYMENT, OrderStatus.PAYMENT_CLAIMED}
)


# Catalog


class Product(CamelModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    barcode: str
    name: str
    brand: str = ""
    category: str = ""
    price: int = Field(..., ge=0, description="Unit price in whole rupees")


class Store(CamelModel):
    model_config = ConfigDict(frozen=True)

    store_id: str
    name: str = ""
    upi_id: str
    upi_qr_code: str = Field(..., description="upi://pay URI template")


# Orders


class OrderItem(Product):
    quantity: int = Field(..., gt=0)
    item_total: int


class Order(CamelModel):
    order_id: str
    store_id: str
    customer_phone: str = "anonymous"
    items: List[OrderItem]
    subtotal: int
    tax: int
    total: int
    status: OrderStatus = OrderStatus.PENDING_PAYMENT
    created_at: datetime
    expires_at: datetime
    payment_claimed_at: Optional[datetime] = None
    utr_last4: Optional[str] = None
    paid_amount: Optional[float] = None
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    verification_notes: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    completed_at: Optional[datetime] = None


class VerificationRecord(CamelModel):
    model_config = ConfigDict(frozen=True)

    verification_id: str
    order_id: str
    cashier_id: str
    verified: bool
    notes: Optional[str] = None
    timestamp: datetime


class UpiDetails(CamelModel):
    upi_id: str
    upi_qr_code: str


class ExitDecision(CamelModel):
    allow_exit: bool
    message: str
    order: Order


class DashboardAnalytics(CamelModel):
    total_orders: int
    today_orders: int
    completed_orders: int
    pending_orders: int
    total_revenue: int
    today_revenue: int
    average_order_value: int


# Requests


class OrderItemRequest(CamelModel):
    product_id: str
    quantity: int = Field(..., gt=0)


class CreateOrderRequest(CamelModel):
    store_id: Optional[str] = None
    items: Optional[List[OrderItemRequest]] = None
    customer_phone: Optional[str] = None


class ClaimPaymentRequest(CamelModel):
    # Some UPI apps hand the UTR digits over as a number.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    utr_last4: Optional[str] = None
    paid_amount: Optional[float] = None


class VerifyOrderRequest(CamelModel):
    order_id: str
    cashier_id: Optional[str] = None
    verified: bool
    notes: Optional[str] = None


class ScanExitRequest(CamelModel):
    order_id: str


class PaymentSessionRequest(CamelModel):
    amount: Optional[float] = None
    phone: Optional[str] = None


# Responses


class ErrorResponse(CamelModel):
    success: bool = False
    message: str


class StoreListResponse(CamelModel):
    success: bool = True
    stores: List[Store]


class StoreResponse(CamelModel):
    success: bool = True
    store: Store


class ProductListResponse(CamelModel):
    success: bool = True
    products: List[Product]
    count: int


class ProductResponse(CamelModel):
    success: bool = True
    product: Product


class CreateOrderResponse(CamelModel):
    success: bool = True
    order: Order
    upi_details: Optional[UpiDetails]


class OrderResponse(CamelModel):
    success: bool = True
    order: Order


class OrderActionResponse(CamelModel):
    success: bool = True
    message: str
    order: Order


class OrderListResponse(CamelModel):
    success: bool = True
    orders: List[Order]
    count: int


class VerifyOrderResponse(CamelModel):
    success: bool = True
    message: str
    order: Order
    verification: VerificationRecord


class ScanExitResponse(CamelModel):
    success: bool
    message: str
    allow_exit: bool
    order: Order


class AnalyticsResponse(CamelModel):
    success: bool = True
    analytics: DashboardAnalytics


class PaymentSessionResponse(CamelModel):
    order_id: str
    payment_session_id: Optional[str]


class HealthResponse(CamelModel):
    success: bool = True
    message: str
    version: str
    endpoints: Dict[str, str]
    stats: Dict[str, int]
