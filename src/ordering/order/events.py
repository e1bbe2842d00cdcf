"""Domain events for the Order aggregate.

Every change to an order raises one of these; the tracking feed turns them
into refresh notifications for the customer and staff order views.
"""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer submitted a checkout and the order was persisted as new."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    status = String(required=True)
    total = Float(required=True)
    payment_method = String(required=True)
    payment_status = String(required=True)
    delivery_type = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """Staff moved the order to another status."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentConfirmed:
    """The payment provider confirmed an order that was awaiting payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_id = String()
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class CourierDispatched:
    """A courier job was booked for a ship order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    delivery_id = String(required=True)
    tracking_url = String()
    dispatched_at = DateTime(required=True)
