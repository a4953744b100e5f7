"""Order placement: final rule checks, server-side pricing and payment redirect."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import date, datetime, timedelta

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.order_rules import ORDER_RULES, ItemAvailabilityRule, OrderRules
from app.models.order import PickupOrder, PickupOrderLine
from app.services.order_status import set_status
from app.services.order_store import SqlOrderStore, as_utc
from app.services.order_validation_service import CartLine, OrderValidationResult, validate_order
from app.services.payment_gateway import (
    CheckoutCustomer,
    CheckoutLineItem,
    CheckoutRequest,
    CheckoutSession,
    PaymentGateway,
    PaymentGatewayError,
    split_full_name,
)
from app.services.slot_service import OpenSlotsResult, list_open_slots, slot_is_open

logger = logging.getLogger(__name__)

# Check-and-insert runs under this lock so two carts cannot both take the
# last unit or slot. Capacity is only guaranteed with a single worker process.
_booking_lock = threading.Lock()


class OrderRejectedError(Exception):
    """Raised when an order fails validation at placement time."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class CustomerDetails(BaseModel):
    full_name: str
    email: str
    phone: str | None = None


class PlaceOrderRequest(BaseModel):
    pickup_date: date
    pickup_time: str
    customer: CustomerDetails
    note: str | None = None
    lines: list[CartLine]


class PlacedOrder(BaseModel):
    order_number: str
    checkout_url: str
    session_id: str | None = None
    total_cents: int


def _capacity_errors(
    lines: list[CartLine],
    pickup_date: date,
    pickup_time: str,
    reference_now: datetime,
    store: SqlOrderStore,
    rules: OrderRules,
) -> list[str]:
    errors: list[str] = []

    open_slots: OpenSlotsResult = list_open_slots(
        pickup_date, store.booked_counts_by_time(pickup_date, reference_now), reference_now, rules=rules
    )
    if not slot_is_open(open_slots, pickup_time):
        errors.append(f"Pickup time {pickup_time} is not available on this date")

    requested: Counter[str] = Counter()
    for line in lines:
        requested[line.item_id] += line.quantity

    sold: dict[str, int] = store.units_sold_by_item(pickup_date, reference_now)
    for item_id, quantity in requested.items():
        rule: ItemAvailabilityRule | None = rules.get_item(item_id)
        if rule is None:
            continue
        left: int = max(0, rule.daily_limit - sold.get(item_id, 0))
        if quantity > left:
            errors.append(f"Only {left} {rule.display_name} left for this date. Please call the bakery.")
    return errors


def _session_expiry(session: CheckoutSession) -> datetime | None:
    if not session.expiration_time:
        return None
    try:
        return as_utc(datetime.fromisoformat(session.expiration_time.replace("Z", "+00:00")))
    except ValueError:
        logger.warning("[CHECKOUT] Unparseable checkout expiration %r; keeping the hold", session.expiration_time)
        return None


def _priced_lines(lines: list[CartLine], rules: OrderRules) -> list[PickupOrderLine]:
    priced: list[PickupOrderLine] = []
    for line in lines:
        rule: ItemAvailabilityRule | None = rules.get_item(line.item_id)
        if rule is None:
            raise OrderRejectedError([f"Item {line.item_id} not found"])
        priced.append(
            PickupOrderLine(
                item_id=rule.item_id,
                name=rule.display_name,
                quantity=line.quantity,
                unit_price_cents=rule.price_cents,
            )
        )
    return priced


def place_order(
    db: Session,
    request: PlaceOrderRequest,
    *,
    reference_now: datetime,
    gateway: PaymentGateway,
    rules: OrderRules = ORDER_RULES,
) -> PlacedOrder:
    """Validate, stage and send an order to the hosted payment page.

    Prices always come from the rule catalog. Capacity is re-checked and the
    pending order committed while holding the booking lock; the payment call
    happens after the lock is released. The pending order holds its slot and
    units until the checkout expires, and is cancelled if no checkout session
    can be created.
    """
    if not request.lines:
        raise OrderRejectedError(["Your cart is empty"])

    validation: OrderValidationResult = validate_order(
        request.lines, request.pickup_date, request.pickup_time, reference_now, rules=rules
    )
    if not validation.valid:
        logger.info("[CHECKOUT] Order rejected for %s: %s", request.pickup_date, validation.errors)
        raise OrderRejectedError(validation.errors)

    store = SqlOrderStore(db)
    with _booking_lock:
        errors: list[str] = _capacity_errors(
            request.lines, request.pickup_date, request.pickup_time, reference_now, store, rules
        )
        if errors:
            logger.info("[CHECKOUT] Capacity rejected for %s %s: %s", request.pickup_date, request.pickup_time, errors)
            raise OrderRejectedError(errors)

        order: PickupOrder = store.add_pending_order(
            pickup_date=request.pickup_date,
            pickup_time=request.pickup_time,
            customer_name=request.customer.full_name,
            customer_email=request.customer.email,
            customer_phone=request.customer.phone,
            note=request.note,
            lines=_priced_lines(request.lines, rules),
            expires_at=reference_now + timedelta(minutes=settings.checkout_hold_minutes),
        )
        line_items: list[CheckoutLineItem] = [
            CheckoutLineItem(name=line.name, price_cents=line.unit_price_cents, quantity=line.quantity)
            for line in order.lines
        ]
        db.commit()

    first_name, last_name = split_full_name(request.customer.full_name)
    checkout_request = CheckoutRequest(
        order_number=order.order_number,
        customer=CheckoutCustomer(
            email=request.customer.email,
            first_name=first_name,
            last_name=last_name,
            phone_number=request.customer.phone or "",
        ),
        line_items=line_items,
        success_url=settings.checkout_success_url,
        failure_url=settings.checkout_failure_url,
        cancel_url=settings.checkout_cancel_url,
    )
    try:
        session: CheckoutSession = gateway.create_checkout(checkout_request)
    except PaymentGatewayError:
        set_status(order, "cancelled", as_utc(reference_now))
        db.commit()
        logger.info("[CHECKOUT] Order %s cancelled; no checkout session", order.order_number)
        raise

    order.checkout_session_id = session.session_id
    order.checkout_url = session.href
    expires_at: datetime | None = _session_expiry(session)
    if expires_at is not None:
        order.checkout_expires_at = expires_at
    db.commit()

    logger.info(
        "[CHECKOUT] Order %s pending payment for %s %s, total_cents=%s",
        order.order_number,
        order.pickup_date,
        order.pickup_time,
        order.total_cents,
    )
    return PlacedOrder(
        order_number=order.order_number,
        checkout_url=session.href,
        session_id=session.session_id,
        total_cents=order.total_cents,
    )
