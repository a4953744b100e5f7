"""Checkout API schemas."""

from datetime import date

from pydantic import BaseModel, Field

from app.schemas.order_rules import CartItemPayload


class CustomerPayload(BaseModel):
    """Customer contact details."""

    full_name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    phone: str | None = Field(default=None, max_length=32)


class CheckoutCreate(BaseModel):
    """Order submitted for payment."""

    pickup_date: date
    pickup_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    customer: CustomerPayload
    note: str | None = Field(default=None, max_length=1000)
    items: list[CartItemPayload] = Field(min_length=1)


class CheckoutResponse(BaseModel):
    """Where to send the customer to pay."""

    order_number: str
    checkout_url: str
    session_id: str | None
    total_cents: int
