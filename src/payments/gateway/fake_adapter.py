"""Configurable fake payment gateway for development and testing.

This adapter simulates the payment provider without any external calls.
It can be configured at runtime to approve, leave pending (with a Pix QR
payload), reject, or fail outright, making it useful for:
- Automated tests with predictable outcomes
- Development without real provider credentials
"""

from uuid import uuid4

from payments.gateway.port import (
    GatewayResponse,
    PaymentGateway,
    PaymentGatewayError,
    PaymentSubmission,
)


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.status: str = "approved"
        self.status_detail: str | None = None
        self.fails: bool = False
        self.calls: list[PaymentSubmission] = []

    def configure(self, status: str = "approved", status_detail: str | None = None, fails: bool = False) -> None:
        """Configure gateway behavior at runtime."""
        self.status = status
        self.status_detail = status_detail
        self.fails = fails

    def create_payment(self, submission: PaymentSubmission) -> GatewayResponse:
        self.calls.append(submission)

        if self.fails:
            raise PaymentGatewayError("Payment provider unreachable")

        payment_id = f"fake_pay_{uuid4().hex[:12]}"
        if self.status == "rejected":
            return GatewayResponse(
                status="rejected",
                payment_id=payment_id,
                status_detail=self.status_detail or "cc_rejected_other_reason",
            )

        if self.status in ("pending", "in_process") and submission.payment_method_id == "pix":
            return GatewayResponse(
                status=self.status,
                payment_id=payment_id,
                status_detail=self.status_detail or "pending_waiting_transfer",
                qr_code=f"00020126580014br.gov.bcb.pix0136{payment_id}",
                qr_code_base64="iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg==",
            )

        return GatewayResponse(
            status=self.status,
            payment_id=payment_id,
            status_detail=self.status_detail or "accredited",
        )
