"""Checkout flow: payment → order → courier, strictly in that order.

    session ready? ──▶ pay (card / Pix) ──▶ rejected ──▶ CheckoutRejected (cart kept)
                                       └──▶ approved / pending ──▶ assemble order
    offline (cash / pay on pickup) ────────────────────────────▶ assemble order
    assemble order ──▶ ship? ──▶ book courier (failures tolerated)

A pending payment still places the order; the customer is shown the Pix
code and pays out of band while the order sits awaiting payment.
"""

from dataclasses import dataclass, field

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from delivery.dispatch import CourierDispatcher, Recipient
from ordering.checkout.assembler import (
    ONLINE_METHODS,
    CheckoutPayment,
    Customer,
    OrderAssembler,
)
from ordering.checkout.session import CheckoutSession
from ordering.order.courier import RecordCourierDispatch
from ordering.order.order import Order
from payments.initiator import (
    PaymentApproved,
    PaymentInitiator,
    PaymentRejected,
    PaymentRequest,
)

logger = structlog.get_logger(__name__)

DISPATCH_WARNING = "We could not book a courier automatically; the shop will arrange the delivery."


@dataclass(frozen=True)
class PaymentInstrument:
    """What the payment form collected. Tokens come from the provider's widget."""

    method: str
    token: str | None = None
    payment_method_id: str | None = None
    payer_email: str | None = None
    installments: int = 1
    issuer_id: str | None = None
    identification_type: str | None = None
    identification_number: str | None = None


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CheckoutConfirmed:
    order_id: str
    payment_id: str | None = None
    delivery_id: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    status = "confirmed"


@dataclass(frozen=True)
class CheckoutAwaitingPayment:
    order_id: str
    payment_id: str | None = None
    qr_code: str | None = None
    qr_code_base64: str | None = None
    delivery_id: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    status = "awaiting_payment"

    def acknowledge(self) -> str:
        """The customer says they paid: hand back the order to track. Payment stays unconfirmed."""
        logger.info("payment_acknowledged_by_customer", order_id=self.order_id, payment_id=self.payment_id)
        return self.order_id


@dataclass(frozen=True)
class CheckoutRejected:
    reason: str
    detail: str | None = None
    status = "rejected"


CheckoutOutcome = CheckoutConfirmed | CheckoutAwaitingPayment | CheckoutRejected


class Checkout:
    def __init__(
        self,
        initiator: PaymentInitiator,
        assembler: OrderAssembler,
        dispatcher: CourierDispatcher,
    ) -> None:
        self.initiator = initiator
        self.assembler = assembler
        self.dispatcher = dispatcher

    def submit(self, session: CheckoutSession, customer: Customer, instrument: PaymentInstrument) -> CheckoutOutcome:
        session.ensure_ready()
        totals = session.totals()
        warnings = []
        if session.is_ship and session.quote is not None and session.quote.warning:
            warnings.append(session.quote.warning)

        result = None
        if instrument.method in ONLINE_METHODS:
            result = self.initiator.submit(
                PaymentRequest(
                    amount=totals.total,
                    method=instrument.method,
                    token=instrument.token,
                    payment_method_id=instrument.payment_method_id,
                    payer_email=instrument.payer_email or customer.email,
                    installments=instrument.installments,
                    issuer_id=instrument.issuer_id,
                    identification_type=instrument.identification_type,
                    identification_number=instrument.identification_number,
                )
            )
            if isinstance(result, PaymentRejected):
                logger.info(
                    "checkout_payment_rejected",
                    customer_id=customer.customer_id,
                    reason=result.reason,
                    detail=result.detail,
                )
                return CheckoutRejected(reason=result.reason, detail=result.detail)

        order_id = self.assembler.submit(
            session.cart,
            session.delivery_selection(),
            CheckoutPayment(method=instrument.method, result=result),
            customer,
            coupon=session.coupon,
        )

        delivery_id = None
        if session.is_ship:
            delivery_id = self._dispatch(order_id, session)
            if delivery_id is None:
                warnings.append(DISPATCH_WARNING)

        if isinstance(result, PaymentApproved):
            return CheckoutConfirmed(
                order_id=order_id,
                payment_id=result.payment_id,
                delivery_id=delivery_id,
                warnings=tuple(warnings),
            )
        return CheckoutAwaitingPayment(
            order_id=order_id,
            payment_id=result.payment_id if result is not None else None,
            qr_code=getattr(result, "qr_code", None),
            qr_code_base64=getattr(result, "qr_code_base64", None),
            delivery_id=delivery_id,
            warnings=tuple(warnings),
        )

    def _dispatch(self, order_id: str, session: CheckoutSession) -> str | None:
        order = current_domain.repository_for(Order).get(order_id)
        dispatched = self.dispatcher.dispatch(
            order,
            session.quote.quote_id if session.quote is not None else None,
            Recipient(name=session.recipient_name, phone=session.recipient_phone),
        )
        if dispatched is None:
            return None

        try:
            current_domain.process(
                RecordCourierDispatch(
                    order_id=order_id,
                    delivery_id=dispatched.delivery_id,
                    tracking_url=dispatched.tracking_url,
                ),
                asynchronous=False,
            )
        except ValidationError as exc:
            logger.warning(
                "courier_dispatch_not_recorded",
                order_id=order_id,
                delivery_id=dispatched.delivery_id,
                error=str(exc.messages),
            )
        return dispatched.delivery_id
