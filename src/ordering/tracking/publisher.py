"""Publishes every Order event into the order change feed."""

from protean import handle

from ordering.domain import ordering
from ordering.order.events import (
    CourierDispatched,
    OrderPaymentConfirmed,
    OrderPlaced,
    OrderStatusChanged,
)
from ordering.order.order import Order
from ordering.tracking.feed import OrderChange, get_feed


@ordering.event_handler(part_of=Order)
class OrderFeedPublisher:
    @handle(OrderPlaced)
    def order_placed(self, event: OrderPlaced) -> None:
        get_feed().publish(
            OrderChange(kind="placed", order_id=str(event.order_id), customer_id=str(event.customer_id), status=event.status)
        )

    @handle(OrderStatusChanged)
    def status_changed(self, event: OrderStatusChanged) -> None:
        get_feed().publish(
            OrderChange(
                kind="status_changed",
                order_id=str(event.order_id),
                customer_id=str(event.customer_id),
                status=event.new_status,
            )
        )

    @handle(OrderPaymentConfirmed)
    def payment_confirmed(self, event: OrderPaymentConfirmed) -> None:
        get_feed().publish(
            OrderChange(kind="payment_confirmed", order_id=str(event.order_id), customer_id=str(event.customer_id))
        )

    @handle(CourierDispatched)
    def courier_dispatched(self, event: CourierDispatched) -> None:
        get_feed().publish(
            OrderChange(kind="courier_dispatched", order_id=str(event.order_id), customer_id=str(event.customer_id))
        )
