"""Courier booking record: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class RecordCourierDispatch:
    order_id = Identifier(required=True)
    delivery_id = String(required=True, max_length=100)
    tracking_url = String(max_length=500)


@ordering.command_handler(part_of=Order)
class RecordCourierDispatchHandler:
    @handle(RecordCourierDispatch)
    def record_dispatch(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_courier_dispatch(command.delivery_id, tracking_url=command.tracking_url)
        repo.add(order)
