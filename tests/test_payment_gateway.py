"""Hosted checkout client tests against a mocked transport."""

import json

import httpx
import pytest

from app.core.config import settings
from app.services.payment_gateway import (
    CheckoutCustomer,
    CheckoutLineItem,
    CheckoutRequest,
    CloverCheckoutGateway,
    PaymentGatewayError,
    build_checkout_payload,
    get_payment_gateway,
    split_full_name,
)

CHECKOUT_URL = "https://clover.test/invoicingcheckoutservice/v1/checkouts"


def _checkout_request() -> CheckoutRequest:
    return CheckoutRequest(
        order_number="PAB-1234ABCD",
        customer=CheckoutCustomer(email="ada@example.com", first_name="Ada", last_name="Baker"),
        line_items=[CheckoutLineItem(name="Old World Italian", price_cents=900, quantity=2)],
        success_url="https://bakery.test/ok",
        failure_url="https://bakery.test/failed",
        cancel_url="https://bakery.test/cancelled",
    )


def _gateway(handler) -> CloverCheckoutGateway:
    return CloverCheckoutGateway(
        api_key="secret-key",
        merchant_id="MERCHANT1",
        checkout_url=CHECKOUT_URL,
        transport=httpx.MockTransport(handler),
    )


def test_split_full_name() -> None:
    assert split_full_name("Ada Lovelace Baker") == ("Ada", "Lovelace Baker")
    assert split_full_name("Cher") == ("Cher", "Customer")
    assert split_full_name("   ") == ("Customer", "Customer")


def test_payload_uses_cents_and_redirects() -> None:
    payload = build_checkout_payload(_checkout_request())

    assert payload["shoppingCart"]["lineItems"] == [{"name": "Old World Italian", "price": 900, "unitQty": 2}]
    assert payload["customer"]["firstName"] == "Ada"
    assert payload["redirectUrls"] == {
        "success": "https://bakery.test/ok",
        "failure": "https://bakery.test/failed",
        "cancel": "https://bakery.test/cancelled",
    }


def test_create_checkout_returns_session() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"href": "https://pay.test/abc", "checkoutSessionId": "abc", "expirationTime": "2026-10-20T18:00:00Z"},
        )

    session = _gateway(handler).create_checkout(_checkout_request())

    assert session.href == "https://pay.test/abc"
    assert session.session_id == "abc"
    assert session.expiration_time == "2026-10-20T18:00:00Z"
    sent = seen[0]
    assert str(sent.url) == CHECKOUT_URL
    assert sent.headers["Authorization"] == "Bearer secret-key"
    assert sent.headers["X-Clover-Merchant-Id"] == "MERCHANT1"
    assert json.loads(sent.content)["shoppingCart"]["lineItems"][0]["price"] == 900


def test_error_status_raises_with_code() -> None:
    gateway = _gateway(lambda request: httpx.Response(401, json={"message": "bad token"}))

    with pytest.raises(PaymentGatewayError) as excinfo:
        gateway.create_checkout(_checkout_request())

    assert excinfo.value.status_code == 401


def test_missing_checkout_url_raises() -> None:
    gateway = _gateway(lambda request: httpx.Response(200, json={"checkoutSessionId": "abc"}))

    with pytest.raises(PaymentGatewayError, match="No checkout URL returned"):
        gateway.create_checkout(_checkout_request())


def test_non_json_body_raises() -> None:
    gateway = _gateway(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    with pytest.raises(PaymentGatewayError, match="Invalid response"):
        gateway.create_checkout(_checkout_request())


def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentGatewayError, match="unreachable"):
        _gateway(handler).create_checkout(_checkout_request())


def test_gateway_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "clover_api_key", "")
    monkeypatch.setattr(settings, "clover_merchant_id", "MERCHANT1")

    with pytest.raises(PaymentGatewayError, match="Server configuration error"):
        get_payment_gateway()


def test_gateway_built_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "clover_api_key", "secret-key")
    monkeypatch.setattr(settings, "clover_merchant_id", "MERCHANT1")

    gateway = get_payment_gateway()

    assert isinstance(gateway, CloverCheckoutGateway)
    assert gateway.merchant_id == "MERCHANT1"
