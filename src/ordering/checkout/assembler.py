"""Order Assembler — turns a paid (or payable) cart into a persisted order.

Preconditions are checked before anything is written. The order, its
items and the ledger credit are then placed in a single PlaceOrder unit of
work, so a failed write leaves nothing behind. On success the cart is
emptied.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import CartStore
from ordering.checkout.pricing import price_order
from ordering.checkout.session import DeliverySelection
from ordering.order.order import PaymentMethod, PaymentStatus
from ordering.order.placement import PlaceOrder
from payments.initiator import PaymentApproved, PaymentPending

logger = structlog.get_logger(__name__)

ONLINE_METHODS = {PaymentMethod.PIX.value, PaymentMethod.CARD.value}
OFFLINE_METHODS = {PaymentMethod.CASH.value, PaymentMethod.PAY_ON_PICKUP.value}


@dataclass(frozen=True)
class Customer:
    customer_id: str
    name: str = ""
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class CheckoutPayment:
    """How the order is paid: an online result, or an offline method with none."""

    method: str
    result: PaymentApproved | PaymentPending | None = None

    @property
    def payment_status(self) -> str:
        if isinstance(self.result, PaymentApproved):
            return PaymentStatus.PAID.value
        return PaymentStatus.AWAITING_PAYMENT.value

    @property
    def payment_id(self) -> str | None:
        return self.result.payment_id if self.result is not None else None


class OrderAssembler:
    def _check(self, cart: CartStore, delivery: DeliverySelection, payment: CheckoutPayment, now) -> None:
        if cart.is_empty:
            raise ValidationError({"cart": ["Cannot place an order from an empty cart"]})

        if delivery.is_ship:
            if delivery.address is None or not delivery.address.number:
                raise ValidationError({"delivery_address": ["Ship orders need a resolved address with a number"]})
            if delivery.quote is None or delivery.quote.is_expired(now):
                raise ValidationError({"delivery_quote": ["Ship orders need an accepted, unexpired quote"]})

        if payment.method in ONLINE_METHODS:
            if not isinstance(payment.result, PaymentApproved | PaymentPending):
                raise ValidationError({"payment": ["Payment must be approved or pending"]})
        elif payment.method in OFFLINE_METHODS:
            if payment.method == PaymentMethod.PAY_ON_PICKUP.value and delivery.is_ship:
                raise ValidationError({"payment_method": ["Pay on pickup is only available for pickup orders"]})
        else:
            raise ValidationError({"payment_method": [f"Unsupported payment method: {payment.method}"]})

    def submit(
        self,
        cart: CartStore,
        delivery: DeliverySelection,
        payment: CheckoutPayment,
        customer: Customer,
        coupon=None,
        now: datetime | None = None,
    ) -> str:
        self._check(cart, delivery, payment, now)

        totals = price_order(cart.subtotal, delivery.fee, coupon)
        items = [
            {
                "product_id": item.product_id,
                "name": item.name,
                "quantity": item.quantity,
                "unit_price": float(item.unit_price),
            }
            for item in cart.items
        ]

        command = PlaceOrder(
            customer_id=customer.customer_id,
            items=json.dumps(items),
            payment_method=payment.method,
            payment_status=payment.payment_status,
            payment_id=payment.payment_id,
            delivery_type=delivery.delivery_type,
            delivery_address=json.dumps(asdict(delivery.address)) if delivery.is_ship else None,
            delivery_fee=float(totals.delivery_fee),
            discount=float(totals.discount),
            coupon_code=coupon.code if coupon is not None else None,
            requested_time=delivery.requested_time,
            note=delivery.note,
        )
        order_id = current_domain.process(command, asynchronous=False)

        cart.clear()
        logger.info(
            "order_assembled",
            order_id=order_id,
            customer_id=customer.customer_id,
            total=str(totals.total),
            payment_status=payment.payment_status,
        )
        return order_id
