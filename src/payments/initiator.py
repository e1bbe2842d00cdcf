"""Payment Initiator: submits a card or Pix payment and interprets the outcome.

    Submitted → Approved   (provider "approved")
              → Pending    (provider "pending" / "in_process", e.g. Pix QR)
              → Rejected   (provider "rejected", unknown statuses, and any
                            side-channel failure)

The amount is always computed by the caller from the cart and the accepted
delivery fee; the initiator never trusts an amount coming from a payment UI.
"""

import os
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import uuid4

import structlog
from protean.exceptions import ValidationError

from payments.gateway.port import PaymentGateway, PaymentGatewayError, PaymentSubmission
from shared.money import round_money

logger = structlog.get_logger(__name__)

DEFAULT_DESCRIPTION = "Pedido Tarsi Sweet"
DEFAULT_PAYER_EMAIL = "pagamentos@tarsisweet.com.br"
MAX_INSTALLMENTS = 3


class PaymentMethod(Enum):
    PIX = "pix"
    CARD = "card"


# ---------------------------------------------------------------------------
# Result variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PaymentApproved:
    payment_id: str
    status = "approved"


@dataclass(frozen=True)
class PaymentPending:
    payment_id: str | None
    qr_code: str | None = None
    qr_code_base64: str | None = None
    status = "pending"


@dataclass(frozen=True)
class PaymentRejected:
    reason: str
    detail: str | None = None
    status = "rejected"


PaymentResult = PaymentApproved | PaymentPending | PaymentRejected


@dataclass(frozen=True)
class PaymentRequest:
    amount: Decimal
    method: str
    token: str | None = None
    payment_method_id: str | None = None
    payer_email: str | None = None
    installments: int = 1
    issuer_id: str | None = None
    description: str = DEFAULT_DESCRIPTION
    identification_type: str | None = None
    identification_number: str | None = None


def default_payer_email() -> str:
    return os.environ.get("DEFAULT_PAYER_EMAIL", DEFAULT_PAYER_EMAIL)


class PaymentInitiator:
    def __init__(self, gateway: PaymentGateway, default_email: str | None = None) -> None:
        self.gateway = gateway
        self.default_email = default_email or default_payer_email()

    def _validate(self, request: PaymentRequest) -> None:
        errors = {}
        if request.method not in {m.value for m in PaymentMethod}:
            errors["method"] = [f"Unsupported payment method: {request.method}"]
        if round_money(request.amount) <= 0:
            errors["amount"] = ["Amount must be greater than zero"]
        if not 1 <= request.installments <= MAX_INSTALLMENTS:
            errors["installments"] = [f"Installments must be between 1 and {MAX_INSTALLMENTS}"]
        if request.method == PaymentMethod.CARD.value and not request.token:
            errors["token"] = ["Card payments require an instrument token"]
        if errors:
            raise ValidationError(errors)

    def _payer_email(self, email: str | None) -> str:
        if email and "@" in email:
            return email
        return self.default_email

    def submit(self, request: PaymentRequest) -> PaymentResult:
        self._validate(request)

        is_pix = request.method == PaymentMethod.PIX.value
        submission = PaymentSubmission(
            amount=round_money(request.amount),
            payment_method_id="pix" if is_pix else (request.payment_method_id or "card"),
            token=request.token,
            payer_email=self._payer_email(request.payer_email),
            idempotency_key=str(uuid4()),
            description=request.description or DEFAULT_DESCRIPTION,
            installments=1 if is_pix else request.installments,
            issuer_id=request.issuer_id,
            identification_type=request.identification_type,
            identification_number=request.identification_number,
        )

        try:
            response = self.gateway.create_payment(submission)
        except PaymentGatewayError as exc:
            logger.exception(
                "payment_gateway_error",
                idempotency_key=submission.idempotency_key,
                method=request.method,
                amount=str(submission.amount),
            )
            return PaymentRejected(reason="gateway_error", detail=str(exc))

        log = logger.bind(
            payment_id=response.payment_id,
            idempotency_key=submission.idempotency_key,
            provider_status=response.status,
        )

        if response.status == "approved":
            if not response.payment_id:
                log.error("payment_response_malformed", missing="payment_id")
                return PaymentRejected(reason="gateway_error", detail="Approved payment without identifier")
            log.info("payment_approved", amount=str(submission.amount))
            return PaymentApproved(payment_id=response.payment_id)

        if response.status in ("pending", "in_process"):
            log.info("payment_pending", has_qr_code=response.qr_code is not None)
            return PaymentPending(
                payment_id=response.payment_id,
                qr_code=response.qr_code,
                qr_code_base64=response.qr_code_base64,
            )

        if response.status == "rejected":
            log.info("payment_rejected", status_detail=response.status_detail)
            return PaymentRejected(reason="rejected", detail=response.status_detail)

        log.warning("payment_status_unknown")
        return PaymentRejected(reason="unknown_status", detail=response.status)
