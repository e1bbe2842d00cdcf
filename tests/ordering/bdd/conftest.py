"""Shared BDD fixtures and step definitions for the Ordering domain."""

from decimal import Decimal

import pytest
from delivery.address.fake_adapter import FakeAddressLookup
from delivery.address.resolver import AddressResolver
from delivery.courier.fake_adapter import FakeCourier
from delivery.dispatch import CourierDispatcher
from delivery.quoting import DeliveryQuoter
from ordering.cart.cart import CartStore
from ordering.cart.storage import InMemoryCartStorage
from ordering.checkout.assembler import Customer, OrderAssembler
from ordering.checkout.flow import Checkout
from ordering.checkout.session import CheckoutSession
from ordering.order.order import Order
from payments.gateway.fake_adapter import FakeGateway
from payments.initiator import PaymentInitiator
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def courier():
    return FakeCourier()


@pytest.fixture()
def customer():
    return Customer(customer_id="cust-bdd-001", name="Maria Silva", email="maria@example.com")


@pytest.fixture()
def checkout(gateway, courier):
    return Checkout(PaymentInitiator(gateway), OrderAssembler(), CourierDispatcher(courier))


@pytest.fixture()
def result():
    """Container for the checkout outcome or the error it raised."""
    return {"outcome": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a cart with {qty1:d} "{name1}" at {price1:f} and {qty2:d} "{name2}" at {price2:f}'),
    target_fixture="session",
)
def _(qty1, name1, price1, qty2, name2, price2, make_product):
    cart = CartStore(InMemoryCartStorage())
    cart.add(make_product("prod-1", name1, price1), quantity=qty1)
    cart.add(make_product("prod-2", name2, price2), quantity=qty2)
    return CheckoutSession(cart)


@given("the customer picks the order up at the shop")
def _(session):
    session.choose_pickup()


@given(parsers.cfparse('the customer ships to postal code "{postal_code}" number "{number}"'))
def _(session, postal_code, number):
    session.choose_ship()
    session.resolve_address(AddressResolver(FakeAddressLookup()), postal_code)
    session.update_address(number=number)
    session.set_recipient("Maria Silva", "11988887777")


@given(parsers.cfparse("the delivery is quoted at {fee:f}"))
def _(session, courier, fee):
    courier.configure(fee_minor=int(round(fee * 100)))
    session.request_quote(DeliveryQuoter(courier))


@given("the courier cannot take new deliveries")
def _(courier):
    courier.configure(fee_minor=courier.fee_minor, dispatch_fails=True)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the checkout is "{status}"'))
def _(result, status):
    assert result["error"] is None, result["error"]
    assert result["outcome"].status == status


@then(parsers.cfparse("the order total is {total:f}"))
def _(result, total):
    order = current_domain.repository_for(Order).get(result["outcome"].order_id)
    assert Decimal(str(order.total)) == Decimal(str(total))


@then(parsers.cfparse('the order payment status is "{payment_status}"'))
def _(result, payment_status):
    order = current_domain.repository_for(Order).get(result["outcome"].order_id)
    assert order.payment_status == payment_status


@then("the cart is empty")
def _(session):
    assert session.cart.is_empty


@then(parsers.cfparse("the cart still has {count:d} items"))
def _(session, count):
    assert session.cart.count == count


@then("no order was placed")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
