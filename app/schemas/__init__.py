"""Schema exports."""

from app.schemas.checkout import CheckoutCreate, CheckoutResponse, CustomerPayload
from app.schemas.order_rules import (
    AvailableItemsResponse,
    CartItemPayload,
    SlotQueryRequest,
    ValidateOrderRequest,
)
from app.schemas.staff import (
    CapacityResponse,
    ItemCapacityResponse,
    OrderStatusResponse,
    OrderStatusUpdate,
    SlotCapacityResponse,
    StaffLoginRequest,
    StaffSessionResponse,
)

__all__ = [
    "AvailableItemsResponse",
    "CartItemPayload",
    "SlotQueryRequest",
    "ValidateOrderRequest",
    "CheckoutCreate",
    "CheckoutResponse",
    "CustomerPayload",
    "CapacityResponse",
    "ItemCapacityResponse",
    "OrderStatusResponse",
    "OrderStatusUpdate",
    "SlotCapacityResponse",
    "StaffLoginRequest",
    "StaffSessionResponse",
]
