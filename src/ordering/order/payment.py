"""Payment provider callback — command and handler.

Asynchronous instruments (Pix) leave the order awaiting payment; the
provider later calls back and this records the confirmation.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ConfirmOrderPayment:
    order_id = Identifier(required=True)
    payment_id = String(max_length=100)


@ordering.command_handler(part_of=Order)
class ConfirmOrderPaymentHandler:
    @handle(ConfirmOrderPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm_payment(payment_id=command.payment_id)
        repo.add(order)
