"""Test helpers for bakery-local times and throwaway databases."""

from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.db.session import build_engine
from app.models.order import PickupOrder, PickupOrderLine
from app.services.order_store import SqlOrderStore
from app.services.payment_gateway import CheckoutRequest, CheckoutSession, PaymentGatewayError

DENVER = ZoneInfo("America/Denver")


def denver(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=DENVER)


def build_test_engine(db_file: Path) -> Engine:
    return build_engine(f"sqlite:///{db_file}")


def seed_order(
    db: Session,
    pickup_date: date,
    pickup_time: str,
    lines: list[tuple[str, int]],
    status: str = "pending",
    expires_at: datetime | None = None,
) -> PickupOrder:
    order = SqlOrderStore(db).add_pending_order(
        pickup_date=pickup_date,
        pickup_time=pickup_time,
        customer_name="Walk In",
        customer_email="walkin@example.com",
        customer_phone=None,
        note=None,
        lines=[
            PickupOrderLine(item_id=item_id, name=item_id, quantity=quantity, unit_price_cents=100)
            for item_id, quantity in lines
        ],
        expires_at=expires_at,
    )
    order.status = status
    db.commit()
    return order


class RecordingGateway:
    """Payment gateway double that records requests and returns a fixed session."""

    def __init__(self, expiration_time: str | None = None) -> None:
        self.requests: list[CheckoutRequest] = []
        self.expiration_time = expiration_time

    def create_checkout(self, request: CheckoutRequest) -> CheckoutSession:
        self.requests.append(request)
        return CheckoutSession(
            href=f"https://pay.example.com/{request.order_number}",
            session_id=f"session-{len(self.requests)}",
            expiration_time=self.expiration_time,
        )


class FailingGateway:
    def create_checkout(self, request: CheckoutRequest) -> CheckoutSession:
        raise PaymentGatewayError("Payment service returned 500", 500)
