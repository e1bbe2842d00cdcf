"""Integration tests for the storefront checkout endpoints via TestClient."""

import inspect
from datetime import UTC, datetime, timedelta

import pytest
from delivery.address import get_lookup
from delivery.courier import get_courier
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import checkout_router, coupon_router, order_router, routes
from payments.gateway import get_gateway
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(coupon_router)
    register_exception_handlers(app)
    return TestClient(app)


LINES = [
    {"line_id": "l1", "product_id": "prod-trufas", "name": "Trufas", "unit_price": 45.0, "quantity": 2},
    {"line_id": "l2", "product_id": "prod-bolo", "name": "Bolo de cenoura", "unit_price": 60.0, "quantity": 1},
]

ADDRESS = {
    "postal_code": "01310100",
    "street": "Avenida Paulista",
    "number": "1000",
    "complement": "apto 12",
    "district": "Bela Vista",
    "city": "São Paulo",
    "region": "SP",
}


def _checkout_body(**overrides):
    body = {
        "customer_id": "cust-api-001",
        "customer_name": "Maria Silva",
        "customer_email": "maria@example.com",
        "items": LINES,
        "delivery_type": "pickup",
        "payment": {"method": "card", "token": "tok_visa", "payment_method_id": "visa"},
    }
    body.update(overrides)
    return body


def _ship_body(client, **overrides):
    quote = client.post("/checkout/quote", json=ADDRESS).json()
    body = _checkout_body(
        delivery_type="ship",
        address=ADDRESS,
        quote={"quote_id": quote["quote_id"], "fee": quote["fee"], "expires_at": quote["expires_at"]},
        recipient_name="Maria Silva",
        recipient_phone="11988887777",
    )
    body.update(overrides)
    return body


class TestAddressLookup:
    def test_known_postal_code(self, client):
        response = client.get("/checkout/address/01310-100")
        assert response.status_code == 200
        assert response.json() == {
            "postal_code": "01310100",
            "street": "Avenida Paulista",
            "district": "Bela Vista",
            "city": "São Paulo",
            "region": "SP",
        }

    def test_malformed_postal_code(self, client):
        assert client.get("/checkout/address/123").status_code == 400

    def test_unknown_postal_code(self, client):
        assert client.get("/checkout/address/99999999").status_code == 404

    def test_lookup_outage_is_bad_gateway(self, client):
        get_lookup().configure(available=False)
        response = client.get("/checkout/address/01310-100")
        assert response.status_code == 502
        assert response.json()["detail"] == "Address lookup unavailable"


class TestQuote:
    def test_quote_from_courier(self, client):
        response = client.post("/checkout/quote", json=ADDRESS)
        assert response.status_code == 200
        body = response.json()
        assert body["fee"] == 15.0
        assert body["quote_id"].startswith("fake_quote_")
        assert body["fallback"] is False

    def test_quote_falls_back_to_default_fee(self, client):
        get_courier().configure(quote_fails=True)
        body = client.post("/checkout/quote", json=ADDRESS).json()
        assert body["fallback"] is True
        assert body["fee"] == 15.0
        assert body["quote_id"] is None
        assert body["warning"]

    def test_quote_needs_a_number(self, client):
        response = client.post("/checkout/quote", json={**ADDRESS, "number": ""})
        assert response.status_code == 400


class TestSubmit:
    def test_pickup_card_checkout(self, client):
        response = client.post("/checkout", json=_checkout_body())
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "confirmed"

        order = client.get(f"/orders/{body['order_id']}").json()
        assert order["total"] == 150.0
        assert order["payment_status"] == "paid"
        assert len(order["items"]) == 2

    def test_ship_pix_checkout_waits_for_payment(self, client):
        get_gateway().configure(status="pending")
        response = client.post("/checkout", json=_ship_body(client, payment={"method": "pix"}))
        body = response.json()
        assert body["status"] == "awaiting_payment"
        assert body["qr_code"]
        assert body["delivery_id"].startswith("fake_del_")

        order = client.get(f"/orders/{body['order_id']}").json()
        assert order["total"] == 165.0
        assert order["delivery_address"]["number"] == "1000"
        assert order["courier_delivery_id"] == body["delivery_id"]

    def test_rejected_card(self, client):
        get_gateway().configure(status="rejected", status_detail="cc_rejected_bad_filled_security_code")
        body = client.post("/checkout", json=_checkout_body()).json()
        assert body["status"] == "rejected"
        assert body["detail"] == "cc_rejected_bad_filled_security_code"
        assert client.get("/orders").json()["orders"] == []

    def test_expired_quote_is_refused(self, client):
        body = _ship_body(client)
        body["quote"]["expires_at"] = (datetime.now(UTC) - timedelta(minutes=1)).isoformat()
        assert client.post("/checkout", json=body).status_code == 400

    def test_coupon_is_applied(self, client):
        client.post("/coupons", json={"code": "DEZ", "percent_off": 10})
        body = client.post("/checkout", json=_checkout_body(coupon_code="dez")).json()
        order = client.get(f"/orders/{body['order_id']}").json()
        assert order["discount"] == 15.0
        assert order["total"] == 135.0
        assert order["coupon_code"] == "DEZ"

    def test_unknown_coupon(self, client):
        response = client.post("/checkout", json=_checkout_body(coupon_code="NAOEXISTE"))
        assert response.status_code == 404

    def test_quote_deadline_without_offset_is_accepted(self, client):
        body = _ship_body(client)
        body["quote"]["expires_at"] = "2099-01-01T00:00:00"
        response = client.post("/checkout", json=body)
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"

    def test_unknown_delivery_type_is_unprocessable(self, client):
        response = client.post("/checkout", json=_checkout_body(delivery_type="delivery"))
        assert response.status_code == 422
        assert client.get("/orders").json()["orders"] == []


class TestLoyaltyPoints:
    def test_balance_sums_orders_and_skips_cancelled(self, client):
        first = client.post("/checkout", json=_checkout_body()).json()["order_id"]
        client.post("/checkout", json=_checkout_body())
        client.post("/checkout", json=_checkout_body(customer_id="cust-api-002"))

        assert client.get("/orders/points", params={"customer_id": "cust-api-001"}).json() == {
            "customer_id": "cust-api-001",
            "points": 300,
        }

        client.put(f"/orders/{first}/status", json={"status": "cancelled"})
        assert client.get("/orders/points", params={"customer_id": "cust-api-001"}).json()["points"] == 150

    def test_customer_without_orders(self, client):
        assert client.get("/orders/points", params={"customer_id": "cust-nobody"}).json()["points"] == 0

    def test_customer_is_required(self, client):
        assert client.get("/orders/points").status_code == 422


@pytest.mark.parametrize(
    "handler",
    [routes.lookup_address, routes.quote_delivery, routes.submit_checkout, routes.get_delivery, routes.cancel_delivery],
)
def test_provider_bound_handlers_run_in_the_threadpool(handler):
    assert not inspect.iscoroutinefunction(handler)
