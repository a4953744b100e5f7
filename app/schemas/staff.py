"""Staff API schemas."""

from datetime import date

from pydantic import BaseModel, Field


class StaffLoginRequest(BaseModel):
    """Staff login payload."""

    password: str


class StaffSessionResponse(BaseModel):
    """Staff session state."""

    authenticated: bool


class SlotCapacityResponse(BaseModel):
    """Capacity of one pickup slot."""

    time: str
    max_orders: int
    booked: int
    remaining: int


class ItemCapacityResponse(BaseModel):
    """Units sold and left for one catalog item."""

    id: str
    name: str
    daily_limit: int
    sold: int
    remaining: int


class CapacityResponse(BaseModel):
    """Staff view of a pickup date's capacity."""

    pickup_date: date
    blackout: bool
    reduced_capacity: bool
    slots: list[SlotCapacityResponse]
    items: list[ItemCapacityResponse]


class OrderStatusUpdate(BaseModel):
    """Requested status for a pickup order."""

    status: str = Field(pattern=r"^(pending|paid|cancelled)$")


class OrderStatusResponse(BaseModel):
    """Pickup order status after a change."""

    order_number: str
    status: str
