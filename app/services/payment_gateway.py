"""Hosted checkout integration with the Clover invoicing checkout service."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field

from app.core.config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when a hosted checkout session cannot be created."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CheckoutCustomer(BaseModel):
    """Customer contact details forwarded to the payment page."""

    email: str
    first_name: str
    last_name: str
    phone_number: str = ""


class CheckoutLineItem(BaseModel):
    """Line item priced from the server-side catalog."""

    name: str
    price_cents: int = Field(gt=0)
    quantity: int = Field(ge=1)


class CheckoutRequest(BaseModel):
    """Everything the payment page needs for one order."""

    order_number: str
    customer: CheckoutCustomer
    line_items: list[CheckoutLineItem]
    success_url: str
    failure_url: str
    cancel_url: str


class CheckoutSession(BaseModel):
    """Hosted checkout session returned by the payment processor."""

    href: str
    session_id: str | None = None
    expiration_time: str | None = None


class PaymentGateway(Protocol):
    def create_checkout(self, request: CheckoutRequest) -> CheckoutSession: ...


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split a full name into first and last name, defaulting to 'Customer'."""
    parts: list[str] = full_name.split()
    first_name: str = parts[0] if parts else "Customer"
    last_name: str = " ".join(parts[1:]) or "Customer"
    return first_name, last_name


def build_checkout_payload(request: CheckoutRequest) -> dict[str, Any]:
    """Build the Clover hosted checkout request body."""
    payload: dict[str, Any] = {
        "customer": {
            "email": request.customer.email,
            "firstName": request.customer.first_name,
            "lastName": request.customer.last_name,
            "phoneNumber": request.customer.phone_number,
        },
        "shoppingCart": {
            "lineItems": [
                {"name": item.name, "price": item.price_cents, "unitQty": item.quantity}
                for item in request.line_items
            ],
        },
        "redirectUrls": {
            "success": request.success_url,
            "failure": request.failure_url,
            "cancel": request.cancel_url,
        },
    }
    return payload


class CloverCheckoutGateway:
    """Creates hosted checkout sessions over HTTP."""

    def __init__(
        self,
        *,
        api_key: str,
        merchant_id: str,
        checkout_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.merchant_id = merchant_id
        self.checkout_url = checkout_url
        self.timeout = timeout
        self.transport = transport

    def create_checkout(self, request: CheckoutRequest) -> CheckoutSession:
        headers: dict[str, str] = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Clover-Merchant-Id": self.merchant_id,
        }
        logger.info(
            "[PAYMENT] Creating checkout for order %s with %s line items",
            request.order_number,
            len(request.line_items),
        )
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response: httpx.Response = client.post(
                    self.checkout_url,
                    json=build_checkout_payload(request),
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            logger.error("[PAYMENT] Checkout request failed for order %s: %s", request.order_number, exc)
            raise PaymentGatewayError("Payment service unreachable") from exc

        if response.is_error:
            logger.error(
                "[PAYMENT] Checkout API returned %s for order %s: %s",
                response.status_code,
                request.order_number,
                response.text,
            )
            raise PaymentGatewayError(f"Payment service returned {response.status_code}", response.status_code)

        try:
            data: dict[str, Any] = response.json()
        except ValueError as exc:
            raise PaymentGatewayError("Invalid response from payment service") from exc

        href: str | None = data.get("href")
        if not href:
            logger.error("[PAYMENT] No checkout URL in response for order %s", request.order_number)
            raise PaymentGatewayError("No checkout URL returned")

        return CheckoutSession(
            href=href,
            session_id=data.get("checkoutSessionId"),
            expiration_time=data.get("expirationTime"),
        )


def get_payment_gateway() -> PaymentGateway:
    """Build the configured gateway; missing credentials fail the request."""
    if not settings.clover_api_key or not settings.clover_merchant_id:
        logger.error("[PAYMENT] Missing Clover credentials")
        raise PaymentGatewayError("Server configuration error")
    return CloverCheckoutGateway(
        api_key=settings.clover_api_key,
        merchant_id=settings.clover_merchant_id,
        checkout_url=settings.clover_checkout_url,
        timeout=settings.clover_timeout_seconds,
    )
