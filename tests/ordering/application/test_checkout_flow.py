"""Application tests for the end-to-end checkout: payment, order, courier."""

from decimal import Decimal

import pytest
from delivery.courier.fake_adapter import FakeCourier
from delivery.dispatch import CourierDispatcher
from delivery.quoting import FALLBACK_WARNING, DeliveryQuote
from ordering.checkout.assembler import Customer, OrderAssembler
from ordering.checkout.flow import (
    DISPATCH_WARNING,
    Checkout,
    CheckoutAwaitingPayment,
    CheckoutConfirmed,
    CheckoutRejected,
    PaymentInstrument,
)
from ordering.order.order import Order
from payments.gateway.fake_adapter import FakeGateway
from payments.initiator import PaymentInitiator
from protean import current_domain
from protean.exceptions import ValidationError

CUSTOMER = Customer(customer_id="cust-001", name="Maria Silva", email="maria@example.com")
CARD = PaymentInstrument(method="card", token="tok_visa", payment_method_id="visa", installments=2)
PIX = PaymentInstrument(method="pix")


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def courier():
    return FakeCourier()


@pytest.fixture()
def checkout(gateway, courier):
    return Checkout(PaymentInitiator(gateway), OrderAssembler(), CourierDispatcher(courier))


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


class TestApprovedPayment:
    def test_ship_order_is_paid_and_dispatched(self, checkout, gateway, courier, ship_session):
        outcome = checkout.submit(ship_session, CUSTOMER, CARD)

        assert isinstance(outcome, CheckoutConfirmed)
        assert outcome.status == "confirmed"
        assert outcome.delivery_id in courier.deliveries
        assert outcome.warnings == ()

        assert gateway.calls[0].amount == Decimal("165.00")
        assert gateway.calls[0].installments == 2

        order = current_domain.repository_for(Order).get(outcome.order_id)
        assert order.payment_status == "paid"
        assert order.payment_id == outcome.payment_id
        assert order.courier_delivery_id == outcome.delivery_id
        assert order.courier_tracking_url is not None

    def test_courier_gets_the_accepted_quote(self, checkout, courier, ship_session):
        checkout.submit(ship_session, CUSTOMER, CARD)
        manifest = courier.calls[-1]["manifest"]
        assert manifest.quote_id == "quote-001"
        assert manifest.dropoff_phone == "+5511988887777"
        assert manifest.dropoff.street_address.startswith("Avenida Paulista, 1000")

    def test_pickup_order_books_no_courier(self, checkout, courier, ship_session):
        ship_session.choose_pickup()
        outcome = checkout.submit(ship_session, CUSTOMER, CARD)
        assert isinstance(outcome, CheckoutConfirmed)
        assert outcome.delivery_id is None
        assert courier.calls == []

    def test_cart_is_emptied(self, checkout, ship_session):
        checkout.submit(ship_session, CUSTOMER, CARD)
        assert ship_session.cart.is_empty


class TestPendingPix:
    def test_order_waits_for_payment_and_shows_qr(self, checkout, gateway, ship_session):
        gateway.configure(status="pending")
        outcome = checkout.submit(ship_session, CUSTOMER, PIX)

        assert isinstance(outcome, CheckoutAwaitingPayment)
        assert outcome.qr_code is not None
        assert outcome.qr_code_base64 is not None
        assert outcome.acknowledge() == outcome.order_id

        order = current_domain.repository_for(Order).get(outcome.order_id)
        assert order.payment_status == "awaiting_payment"
        assert order.payment_method == "pix"


class TestRejectedPayment:
    def test_nothing_is_written_and_cart_is_kept(self, checkout, gateway, courier, ship_session):
        gateway.configure(status="rejected", status_detail="cc_rejected_insufficient_amount")
        outcome = checkout.submit(ship_session, CUSTOMER, CARD)

        assert isinstance(outcome, CheckoutRejected)
        assert outcome.reason == "rejected"
        assert outcome.detail == "cc_rejected_insufficient_amount"
        assert _orders() == []
        assert not ship_session.cart.is_empty
        assert courier.calls == []

    def test_gateway_failure_is_a_rejection(self, checkout, gateway, ship_session):
        gateway.configure(fails=True)
        outcome = checkout.submit(ship_session, CUSTOMER, CARD)
        assert isinstance(outcome, CheckoutRejected)
        assert outcome.reason == "gateway_error"
        assert _orders() == []


class TestOfflinePayment:
    def test_cash_skips_the_provider(self, checkout, gateway, ship_session):
        outcome = checkout.submit(ship_session, CUSTOMER, PaymentInstrument(method="cash"))
        assert isinstance(outcome, CheckoutAwaitingPayment)
        assert outcome.payment_id is None
        assert gateway.calls == []


class TestCourierFailures:
    def test_dispatch_failure_keeps_the_order(self, checkout, courier, ship_session):
        courier.configure(dispatch_fails=True)
        outcome = checkout.submit(ship_session, CUSTOMER, CARD)

        assert isinstance(outcome, CheckoutConfirmed)
        assert outcome.delivery_id is None
        assert DISPATCH_WARNING in outcome.warnings
        order = current_domain.repository_for(Order).get(outcome.order_id)
        assert order.courier_delivery_id is None

    def test_fallback_quote_warning_is_passed_on(self, checkout, ship_session):
        ship_session.quote = DeliveryQuote(fee=Decimal("15.00"), fallback=True, warning=FALLBACK_WARNING)
        outcome = checkout.submit(ship_session, CUSTOMER, CARD)
        assert FALLBACK_WARNING in outcome.warnings


class TestNotReady:
    def test_missing_quote_stops_before_payment(self, checkout, gateway, ship_session):
        ship_session.quote = None
        with pytest.raises(ValidationError):
            checkout.submit(ship_session, CUSTOMER, CARD)
        assert gateway.calls == []

    def test_card_without_token_is_rejected_before_any_write(self, checkout, ship_session):
        with pytest.raises(ValidationError):
            checkout.submit(ship_session, CUSTOMER, PaymentInstrument(method="card"))
        assert _orders() == []
