"""Order store: booked slot counts and units sold per pickup date."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol
from uuid import uuid4

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from app.models.order import PickupOrder, PickupOrderLine


class OrderStore(Protocol):
    """Read side the ordering rules depend on."""

    def booked_counts_by_time(self, pickup_date: date, as_of: datetime) -> dict[str, int]: ...

    def units_sold_by_item(self, pickup_date: date, as_of: datetime) -> dict[str, int]: ...


def as_utc(moment: datetime) -> datetime:
    """Normalize an aware moment to UTC so stored and compared values line up on every backend."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def holds_capacity(as_of: datetime):
    """Paid orders, and pending orders whose checkout has not expired at ``as_of``."""
    return or_(
        PickupOrder.status == "paid",
        and_(
            PickupOrder.status == "pending",
            or_(PickupOrder.checkout_expires_at.is_(None), PickupOrder.checkout_expires_at > as_utc(as_of)),
        ),
    )


class SqlOrderStore:
    """OrderStore backed by the pickup order tables.

    Cancelled orders and abandoned checkouts (pending past their expiry) do
    not count against slot or daily capacity.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def booked_counts_by_time(self, pickup_date: date, as_of: datetime) -> dict[str, int]:
        rows = (
            self.db.query(PickupOrder.pickup_time, func.count(PickupOrder.id))
            .filter(PickupOrder.pickup_date == pickup_date, holds_capacity(as_of))
            .group_by(PickupOrder.pickup_time)
            .all()
        )
        return {str(pickup_time): int(count) for pickup_time, count in rows}

    def units_sold_by_item(self, pickup_date: date, as_of: datetime) -> dict[str, int]:
        rows = (
            self.db.query(PickupOrderLine.item_id, func.sum(PickupOrderLine.quantity))
            .join(PickupOrder, PickupOrderLine.order_id == PickupOrder.id)
            .filter(PickupOrder.pickup_date == pickup_date, holds_capacity(as_of))
            .group_by(PickupOrderLine.item_id)
            .all()
        )
        return {str(item_id): int(quantity or 0) for item_id, quantity in rows}

    def get_by_number(self, order_number: str) -> PickupOrder | None:
        return self.db.query(PickupOrder).filter(PickupOrder.order_number == order_number).one_or_none()

    def add_pending_order(
        self,
        *,
        pickup_date: date,
        pickup_time: str,
        customer_name: str,
        customer_email: str,
        customer_phone: str | None,
        note: str | None,
        lines: list[PickupOrderLine],
        expires_at: datetime | None = None,
    ) -> PickupOrder:
        """Stage a pending order in the current transaction; the caller commits."""
        order = PickupOrder(
            order_number=new_order_number(),
            pickup_date=pickup_date,
            pickup_time=pickup_time,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            note=note,
            status="pending",
            total_cents=sum(line.unit_price_cents * line.quantity for line in lines),
            checkout_expires_at=as_utc(expires_at) if expires_at is not None else None,
            lines=lines,
        )
        self.db.add(order)
        self.db.flush()
        return order


def new_order_number() -> str:
    return f"PAB-{uuid4().hex[:8].upper()}"
