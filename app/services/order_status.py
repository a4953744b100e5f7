"""Pickup order status transitions."""

from __future__ import annotations

from datetime import datetime

from app.models.order import PickupOrder

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"paid", "cancelled"},
    "paid": {"cancelled"},
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    """Return whether an order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def set_status(order: PickupOrder, new_status: str, now: datetime) -> None:
    """Set status and stamp the change; the caller commits."""
    order.status = new_status
    order.status_updated_at = now
