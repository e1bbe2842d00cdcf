"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and
MercadoPagoGateway (production) without changing any checkout code.

Adapters only transport: they hand back the provider's status strings
untouched and leave their interpretation to the PaymentInitiator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


class PaymentGatewayError(Exception):
    """Side-channel failure: network error or malformed provider response."""


@dataclass(frozen=True)
class PaymentSubmission:
    """One charge attempt, exactly as it is sent to the provider."""

    amount: Decimal
    payment_method_id: str
    token: str | None
    payer_email: str
    idempotency_key: str
    description: str
    installments: int = 1
    issuer_id: str | None = None
    payer_first_name: str = "Cliente"
    identification_type: str | None = None
    identification_number: str | None = None


@dataclass(frozen=True)
class GatewayResponse:
    """Provider answer. Every optional field defaults to None."""

    status: str
    payment_id: str | None = None
    status_detail: str | None = None
    qr_code: str | None = None
    qr_code_base64: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment(self, submission: PaymentSubmission) -> GatewayResponse:
        """Submit a payment. Raises PaymentGatewayError on side-channel failures."""
        ...
