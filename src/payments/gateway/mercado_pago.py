"""Mercado Pago adapter for card and Pix payments.

Uses the Payments REST API directly. Each request carries the caller's
idempotency key so a retried submission can never charge twice.
"""

import os

import httpx
import structlog

from payments.gateway.port import (
    GatewayResponse,
    PaymentGateway,
    PaymentGatewayError,
    PaymentSubmission,
)

logger = structlog.get_logger(__name__)

MERCADO_PAGO_BASE_URL = "https://api.mercadopago.com"


def _build_body(submission: PaymentSubmission) -> dict:
    payer = {"email": submission.payer_email, "first_name": submission.payer_first_name}
    if submission.identification_type and submission.identification_number:
        payer["identification"] = {
            "type": submission.identification_type,
            "number": submission.identification_number,
        }

    body = {
        "transaction_amount": float(submission.amount),
        "description": submission.description,
        "payment_method_id": submission.payment_method_id,
        "installments": submission.installments,
        "payer": payer,
    }
    if submission.token:
        body["token"] = submission.token
    if submission.issuer_id:
        body["issuer_id"] = submission.issuer_id
    return body


def _parse_response(payload) -> GatewayResponse:
    if not isinstance(payload, dict) or not isinstance(payload.get("status"), str):
        raise PaymentGatewayError("Payment response has no status")

    transaction_data = (payload.get("point_of_interaction") or {}).get("transaction_data") or {}
    payment_id = payload.get("id")
    return GatewayResponse(
        status=payload["status"],
        payment_id=str(payment_id) if payment_id is not None else None,
        status_detail=payload.get("status_detail"),
        qr_code=transaction_data.get("qr_code"),
        qr_code_base64=transaction_data.get("qr_code_base64"),
    )


class MercadoPagoGateway(PaymentGateway):
    def __init__(self, access_token: str, client: httpx.Client | None = None, timeout: float = 15.0) -> None:
        if not access_token:
            raise ValueError("Missing Mercado Pago access token")
        self._client = client or httpx.Client(base_url=MERCADO_PAGO_BASE_URL, timeout=timeout)
        self._access_token = access_token

    @classmethod
    def from_env(cls) -> "MercadoPagoGateway":
        return cls(access_token=os.environ.get("MERCADOPAGO_ACCESS_TOKEN", ""))

    def create_payment(self, submission: PaymentSubmission) -> GatewayResponse:
        try:
            response = self._client.post(
                "/v1/payments",
                json=_build_body(submission),
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "X-Idempotency-Key": submission.idempotency_key,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise PaymentGatewayError(
                f"Payment provider answered {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise PaymentGatewayError(f"Payment provider request failed: {exc}") from exc

        return _parse_response(payload)

    def close(self) -> None:
        self._client.close()
