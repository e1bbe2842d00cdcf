"""Order placement — command and handler.

The order, its line items and the matching cash-book credit are written in
one unit of work: if any of them fails, none of them is persisted.
"""

import json

from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.ledger.entry import LedgerEntry
from ordering.order.order import Order


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, name, quantity, unit_price}
    payment_method = String(required=True, max_length=20)
    payment_status = String(required=True, max_length=20)
    payment_id = String(max_length=100)
    delivery_type = String(required=True, max_length=10)
    delivery_address = Text()  # JSON: address dict, ship orders only
    delivery_fee = Float(default=0.0)
    discount = Float(default=0.0)
    coupon_code = String(max_length=50)
    requested_time = DateTime()
    note = Text()


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        delivery_address = (
            json.loads(command.delivery_address)
            if isinstance(command.delivery_address, str)
            else command.delivery_address
        )

        order = Order.place(
            customer_id=command.customer_id,
            items_data=items_data,
            payment_method=command.payment_method,
            payment_status=command.payment_status,
            payment_id=command.payment_id,
            delivery_type=command.delivery_type,
            delivery_address=delivery_address,
            delivery_fee=command.delivery_fee or 0.0,
            discount=command.discount or 0.0,
            coupon_code=command.coupon_code,
            requested_time=command.requested_time,
            note=command.note,
        )
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(LedgerEntry).add(LedgerEntry.credit_for_order(order))

        logger.info(
            "order_placed",
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            total=order.total,
            payment_status=order.payment_status,
        )
        return str(order.id)
