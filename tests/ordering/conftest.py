import json
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
ITEMS = [
    {"product_id": "prod-trufas", "name": "Trufas", "quantity": 2, "unit_price": 45.0},
    {"product_id": "prod-bolo", "name": "Bolo de cenoura", "quantity": 1, "unit_price": 60.0},
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


def product(product_id="prod-trufas", name="Trufas", price=45.0):
    """Stand-in for a catalogue Product: the cart only reads id, name and price."""
    return SimpleNamespace(id=product_id, name=name, price=price)


def place_order_command(**overrides):
    from ordering.order.placement import PlaceOrder

    data = {
        "customer_id": "cust-001",
        "items": json.dumps(ITEMS),
        "payment_method": "pix",
        "payment_status": "paid",
        "payment_id": "pay-001",
        "delivery_type": "pickup",
    }
    data.update(overrides)
    return PlaceOrder(**data)


@pytest.fixture()
def make_product():
    return product


@pytest.fixture()
def make_place_order():
    return place_order_command


@pytest.fixture()
def items():
    return [dict(item) for item in ITEMS]


@pytest.fixture()
def address():
    return dict(ADDRESS)


@pytest.fixture()
def cart():
    from ordering.cart.cart import CartStore
    from ordering.cart.storage import InMemoryCartStorage

    store = CartStore(InMemoryCartStorage())
    store.add(product("prod-trufas", "Trufas", 45.0), quantity=2)
    store.add(product("prod-bolo", "Bolo de cenoura", 60.0))
    return store


@pytest.fixture()
def fresh_quote():
    from delivery.quoting import DeliveryQuote

    return DeliveryQuote(
        fee=Decimal("15.00"),
        quote_id="quote-001",
        expires_at=datetime.now(UTC) + timedelta(minutes=15),
    )


@pytest.fixture()
def ship_session(cart, fresh_quote):
    """A checkout session ready to ship to Avenida Paulista."""
    from delivery.address.fake_adapter import FakeAddressLookup
    from delivery.address.resolver import AddressResolver
    from ordering.checkout.session import CheckoutSession

    session = CheckoutSession(cart)
    session.choose_ship()
    session.resolve_address(AddressResolver(FakeAddressLookup()), "01310-100")
    session.update_address(number="1000", complement="apto 12")
    session.set_recipient("Maria Silva", "(11) 98888-7777")
    session.quote = fresh_quote
    return session
