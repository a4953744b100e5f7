"""Checkout endpoint."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.deps import ensure_pickup_date_in_window, get_reference_now
from app.db.session import get_db
from app.schemas.checkout import CheckoutCreate, CheckoutResponse
from app.services.checkout_service import (
    CustomerDetails,
    OrderRejectedError,
    PlaceOrderRequest,
    PlacedOrder,
    place_order,
)
from app.services.order_validation_service import CartLine
from app.services.payment_gateway import PaymentGateway, PaymentGatewayError, get_payment_gateway

router: APIRouter = APIRouter()


@router.post("", response_model=CheckoutResponse)
def create_checkout(
    payload: CheckoutCreate,
    db: Session = Depends(get_db),
    reference_now: datetime = Depends(get_reference_now),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> CheckoutResponse | JSONResponse:
    """Place a pending order and return the hosted payment page URL."""
    ensure_pickup_date_in_window(payload.pickup_date, reference_now)
    request = PlaceOrderRequest(
        pickup_date=payload.pickup_date,
        pickup_time=payload.pickup_time,
        customer=CustomerDetails(
            full_name=payload.customer.full_name,
            email=payload.customer.email,
            phone=payload.customer.phone,
        ),
        note=payload.note,
        lines=[CartLine(item_id=item.id, quantity=item.quantity) for item in payload.items],
    )

    try:
        placed: PlacedOrder = place_order(db, request, reference_now=reference_now, gateway=gateway)
    except OrderRejectedError as exc:
        return JSONResponse(status_code=400, content={"valid": False, "errors": exc.errors})
    except PaymentGatewayError as exc:
        raise HTTPException(status_code=502, detail="Failed to create payment session") from exc

    return CheckoutResponse(
        order_number=placed.order_number,
        checkout_url=placed.checkout_url,
        session_id=placed.session_id,
        total_cents=placed.total_cents,
    )
