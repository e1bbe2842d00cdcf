"""Order aggregate (CQRS) — a bakery order from checkout to handover.

State Machine (strictly forward, skipping ahead allowed):
    NEW → ACCEPTED → IN_PRODUCTION → READY → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from any non-terminal state)

Pickup orders go straight from READY to DELIVERED. DELIVERED and CANCELLED
are terminal: the order can no longer change once it reaches either.

Line items snapshot the unit price at order time and are never mutated.
"""

from datetime import UTC, datetime
from decimal import ROUND_FLOOR
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    CourierDispatched,
    OrderPaymentConfirmed,
    OrderPlaced,
    OrderStatusChanged,
)
from shared.money import D, round_money, to_float


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    NEW = "new"
    ACCEPTED = "accepted"
    IN_PRODUCTION = "in_production"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PAID = "paid"
    AWAITING_PAYMENT = "awaiting_payment"


class PaymentMethod(Enum):
    PIX = "pix"
    CARD = "card"
    CASH = "cash"
    PAY_ON_PICKUP = "pay_on_pickup"


class DeliveryType(Enum):
    PICKUP = "pickup"
    SHIP = "ship"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.NEW: {
        OrderStatus.ACCEPTED,
        OrderStatus.IN_PRODUCTION,
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.ACCEPTED: {
        OrderStatus.IN_PRODUCTION,
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.IN_PRODUCTION: {
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.READY: {
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def loyalty_points(total) -> int:
    """Whole currency units of the order total, rounded down."""
    return int(round_money(total).to_integral_value(rounding=ROUND_FLOOR))


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryAddress:
    """Where a ship order goes, captured at checkout time."""

    postal_code = String(required=True, max_length=9)
    street = String(required=True, max_length=255)
    number = String(required=True, max_length=20)
    complement = String(max_length=100)
    district = String(max_length=100)
    city = String(max_length=100)
    region = String(max_length=2)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round_money(D(self.unit_price) * self.quantity)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    status = String(choices=OrderStatus, default=OrderStatus.NEW.value)
    subtotal = Float(required=True, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    coupon_code = String(max_length=50)
    delivery_fee = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.AWAITING_PAYMENT.value)
    payment_id = String(max_length=100)
    delivery_type = String(choices=DeliveryType, default=DeliveryType.PICKUP.value)
    delivery_address = ValueObject(DeliveryAddress)
    requested_time = DateTime()
    note = Text()
    points_earned = Integer(default=0)
    courier_delivery_id = String(max_length=100)
    courier_tracking_url = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        items_data,
        payment_method,
        payment_status=PaymentStatus.AWAITING_PAYMENT.value,
        payment_id=None,
        delivery_type=DeliveryType.PICKUP.value,
        delivery_address=None,
        delivery_fee=0.0,
        discount=0.0,
        coupon_code=None,
        requested_time=None,
        note=None,
    ):
        """Create a new order from checkout data.

        Args:
            items_data: list of dicts with product_id, name, quantity, unit_price.
            delivery_address: dict or DeliveryAddress, required for ship orders.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        if delivery_type == DeliveryType.SHIP.value:
            if delivery_address is None:
                raise ValidationError({"delivery_address": ["Ship orders need a delivery address"]})
        else:
            delivery_address = None
            delivery_fee = 0.0

        if isinstance(delivery_address, dict):
            delivery_address = DeliveryAddress(**delivery_address)

        subtotal = round_money(sum(D(i["unit_price"]) * int(i["quantity"]) for i in items_data))
        discount = min(round_money(discount), subtotal)
        total = round_money(subtotal - discount + D(delivery_fee))
        now = datetime.now(UTC)

        order = cls(
            customer_id=customer_id,
            status=OrderStatus.NEW.value,
            subtotal=to_float(subtotal),
            discount=to_float(discount),
            coupon_code=coupon_code,
            delivery_fee=to_float(delivery_fee),
            total=to_float(total),
            payment_method=payment_method,
            payment_status=payment_status,
            payment_id=payment_id,
            delivery_type=delivery_type,
            delivery_address=delivery_address,
            requested_time=requested_time,
            note=note,
            points_earned=loyalty_points(total),
            created_at=now,
            updated_at=now,
        )

        for item_data in items_data:
            order.add_items(
                OrderItem(
                    product_id=item_data["product_id"],
                    name=item_data["name"],
                    quantity=int(item_data["quantity"]),
                    unit_price=to_float(item_data["unit_price"]),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                status=order.status,
                total=order.total,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                delivery_type=order.delivery_type,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status tracking
    # -------------------------------------------------------------------
    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATES

    def _assert_not_terminal(self, action):
        if self.is_terminal:
            raise ValidationError({"status": [f"Cannot {action}: order is already {self.status}"]})

    def change_status(self, new_status):
        """Move the order along its lifecycle. Re-setting the current status is a no-op."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        current = OrderStatus(self.status)
        if target == current:
            return

        self._assert_not_terminal(f"move to {target.value}")
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move order from {current.value} back to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment callback
    # -------------------------------------------------------------------
    def confirm_payment(self, payment_id=None):
        if self.status == OrderStatus.CANCELLED.value:
            raise ValidationError({"payment_status": ["Cannot confirm payment of a cancelled order"]})
        if self.payment_status == PaymentStatus.PAID.value:
            return

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        if payment_id:
            self.payment_id = payment_id
        self.updated_at = now

        self.raise_(
            OrderPaymentConfirmed(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                payment_id=self.payment_id,
                confirmed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Courier
    # -------------------------------------------------------------------
    def record_courier_dispatch(self, delivery_id, tracking_url=None):
        if self.delivery_type != DeliveryType.SHIP.value:
            raise ValidationError({"delivery_type": ["Only ship orders are handed to a courier"]})
        self._assert_not_terminal("record a courier dispatch")

        now = datetime.now(UTC)
        self.courier_delivery_id = delivery_id
        self.courier_tracking_url = tracking_url
        self.updated_at = now

        self.raise_(
            CourierDispatched(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                delivery_id=delivery_id,
                tracking_url=tracking_url,
                dispatched_at=now,
            )
        )
