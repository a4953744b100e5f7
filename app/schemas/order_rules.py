"""Order availability API schemas."""

from datetime import date

from pydantic import BaseModel, Field

from app.services.availability_service import AvailableItem


class CartItemPayload(BaseModel):
    """Single cart line; any client-side price is ignored."""

    id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class AvailableItemsResponse(BaseModel):
    """Orderable items grouped by category."""

    pickup_date: date
    categories: dict[str, list[AvailableItem]]


class SlotQueryRequest(BaseModel):
    """Slot query with booking counts supplied by the caller."""

    pickup_date: date
    booked_counts_by_time: dict[str, int] = Field(default_factory=dict)


class ValidateOrderRequest(BaseModel):
    """Proposed order to check before checkout."""

    pickup_date: date
    pickup_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    items: list[CartItemPayload]
