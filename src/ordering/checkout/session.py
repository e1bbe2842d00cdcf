"""Checkout session: everything gathered between the cart and the order.

Holds the delivery choice, the address (looked up by postal code, then
completed by the customer), the accepted delivery quote and the coupon.
Any change to the address drops the held quote so a fresh one must be
requested before the order can be submitted.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal

from protean.exceptions import ValidationError

from delivery.address.port import DeliveryAddress, ResolvedAddress
from delivery.address.resolver import AddressResolver
from delivery.quoting import DeliveryQuote, DeliveryQuoter, IncompleteAddress
from ordering.cart.cart import CartStore
from ordering.checkout.pricing import OrderTotals, price_order
from ordering.order.order import DeliveryType

_ADDRESS_FIELDS = ("street", "district", "city", "region")


@dataclass(frozen=True)
class DeliverySelection:
    delivery_type: str
    address: DeliveryAddress | None = None
    quote: DeliveryQuote | None = None
    requested_time: datetime | None = None
    note: str | None = None

    @property
    def is_ship(self) -> bool:
        return self.delivery_type == DeliveryType.SHIP.value

    @property
    def fee(self) -> Decimal:
        if self.is_ship and self.quote is not None:
            return self.quote.fee
        return Decimal("0.00")


class CheckoutSession:
    def __init__(self, cart: CartStore) -> None:
        self.cart = cart
        self.delivery_type = DeliveryType.PICKUP.value
        self.resolved_address: ResolvedAddress | None = None
        self.number = ""
        self.complement = ""
        self.recipient_name = ""
        self.recipient_phone = ""
        self.quote: DeliveryQuote | None = None
        self.coupon = None
        self.requested_time: datetime | None = None
        self.note: str | None = None

    # -------------------------------------------------------------------
    # Delivery choice
    # -------------------------------------------------------------------
    def choose_pickup(self) -> None:
        self.delivery_type = DeliveryType.PICKUP.value
        self.quote = None

    def choose_ship(self) -> None:
        self.delivery_type = DeliveryType.SHIP.value

    @property
    def is_ship(self) -> bool:
        return self.delivery_type == DeliveryType.SHIP.value

    # -------------------------------------------------------------------
    # Address
    # -------------------------------------------------------------------
    def resolve_address(self, resolver: AddressResolver, postal_code: str) -> ResolvedAddress:
        address = resolver.resolve(postal_code)
        self.resolved_address = address
        self.quote = None
        return address

    def update_address(self, **fields) -> None:
        """Edit the address by hand (number, complement, or a looked-up field)."""
        changed = False
        for name, value in fields.items():
            value = value or ""
            if name in ("number", "complement"):
                if getattr(self, name) != value:
                    setattr(self, name, value)
                    changed = True
            elif name in _ADDRESS_FIELDS:
                if self.resolved_address is None:
                    raise ValidationError({"postal_code": ["Look the postal code up before editing the address"]})
                if getattr(self.resolved_address, name) != value:
                    self.resolved_address = replace(self.resolved_address, **{name: value})
                    changed = True
            else:
                raise ValidationError({name: ["Not an address field"]})

        if changed:
            self.quote = None

    @property
    def delivery_address(self) -> DeliveryAddress | None:
        if self.resolved_address is None:
            return None
        return DeliveryAddress.from_resolved(self.resolved_address, number=self.number, complement=self.complement)

    def set_recipient(self, name: str, phone: str) -> None:
        self.recipient_name = name or ""
        self.recipient_phone = phone or ""

    # -------------------------------------------------------------------
    # Quote
    # -------------------------------------------------------------------
    def request_quote(self, quoter: DeliveryQuoter) -> DeliveryQuote:
        address = self.delivery_address
        if address is None:
            raise IncompleteAddress(["street", "number"])
        self.quote = quoter.quote(address)
        return self.quote

    # -------------------------------------------------------------------
    # Coupon
    # -------------------------------------------------------------------
    def apply_coupon(self, coupon, today: date | None = None) -> Decimal:
        discount = coupon.discount_for(self.cart.subtotal, today)
        self.coupon = coupon
        return discount

    def remove_coupon(self) -> None:
        self.coupon = None

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def delivery_selection(self) -> DeliverySelection:
        return DeliverySelection(
            delivery_type=self.delivery_type,
            address=self.delivery_address if self.is_ship else None,
            quote=self.quote if self.is_ship else None,
            requested_time=self.requested_time,
            note=self.note,
        )

    def totals(self, today: date | None = None) -> OrderTotals:
        return price_order(self.cart.subtotal, self.delivery_selection().fee, self.coupon, today)

    def ensure_ready(self, now: datetime | None = None) -> None:
        """Raise ValidationError unless the session can be turned into an order."""
        if self.cart.is_empty:
            raise ValidationError({"cart": ["The cart is empty"]})
        if not self.is_ship:
            return

        address = self.delivery_address
        if address is None or not address.street or not address.number:
            raise ValidationError({"delivery_address": ["Ship orders need a full address with street and number"]})
        if self.quote is None:
            raise ValidationError({"delivery_quote": ["Request a delivery quote before placing the order"]})
        if self.quote.is_expired(now):
            raise ValidationError({"delivery_quote": ["The delivery quote expired; request a new one"]})
        if not self.recipient_name or not self.recipient_phone:
            raise ValidationError({"recipient": ["Ship orders need the recipient's name and phone"]})
