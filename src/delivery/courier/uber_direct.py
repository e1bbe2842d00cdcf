"""Uber Direct courier adapter.

Authenticates with OAuth2 client credentials and talks to the Direct
customer API for quotes, deliveries, status and cancellation. Addresses
travel as JSON-encoded strings inside the request body, as the API expects.
"""

import json
import os
import time
from datetime import UTC, datetime

import httpx
import structlog

from delivery.courier.port import (
    Courier,
    CourierDelivery,
    CourierError,
    CourierQuote,
    DeliveryManifest,
)
from delivery.store import Location

logger = structlog.get_logger(__name__)

TOKEN_URL = "https://login.uber.com/oauth/v2/token"
API_BASE_URL = "https://api.uber.com/v1"
TOKEN_SCOPE = "eats.deliveries direct.organizations"


def _address_json(location: Location) -> str:
    return json.dumps(
        {
            "street_address": [location.street_address],
            "city": location.city,
            "state": location.region,
            "zip_code": location.postal_code,
            "country": location.country,
        },
        ensure_ascii=False,
    )


def _parse_timestamp(value) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _to_delivery(payload: dict) -> CourierDelivery:
    delivery_id = payload.get("id")
    if not delivery_id:
        raise CourierError("Courier response is missing a delivery id")
    fee = payload.get("fee")
    return CourierDelivery(
        delivery_id=str(delivery_id),
        status=str(payload.get("status") or "unknown"),
        tracking_url=payload.get("tracking_url"),
        fee_minor=fee if isinstance(fee, int) else None,
    )


class UberDirectCourier(Courier):
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        customer_id: str,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not (client_id and client_secret and customer_id):
            raise ValueError("Missing Uber Direct credentials")

        self.client_id = client_id
        self.client_secret = client_secret
        self.customer_id = customer_id
        self._client = client or httpx.Client(timeout=timeout)
        self._token: str | None = None
        self._token_expires_at = 0.0

    @classmethod
    def from_env(cls) -> "UberDirectCourier":
        return cls(
            client_id=os.environ.get("UBER_CLIENT_ID", ""),
            client_secret=os.environ.get("UBER_CLIENT_SECRET", ""),
            customer_id=os.environ.get("UBER_CUSTOMER_ID", ""),
        )

    # -------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------
    def _access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        try:
            response = self._client.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials", "scope": TOKEN_SCOPE},
                auth=(self.client_id, self.client_secret),
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("courier_token_failed", error=str(exc))
            raise CourierError("Failed to obtain courier access token") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise CourierError("Courier token response has no access_token")

        # Refresh a minute early
        try:
            expires_in = int(payload.get("expires_in") or 0)
        except (TypeError, ValueError):
            logger.warning("courier_token_expiry_unreadable", expires_in=payload.get("expires_in"))
            expires_in = 0
        self._token = token
        self._token_expires_at = time.monotonic() + max(expires_in - 60, 0)
        return token

    def _request(self, method: str, path: str, body: dict | None = None) -> dict:
        url = f"{API_BASE_URL}/customers/{self.customer_id}{path}"
        try:
            response = self._client.request(
                method,
                url,
                json=body,
                headers={"Authorization": f"Bearer {self._access_token()}"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "courier_request_rejected",
                path=path,
                status_code=exc.response.status_code,
                body=exc.response.text,
            )
            raise CourierError(f"Courier rejected {method} {path}: {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("courier_request_failed", path=path, error=str(exc))
            raise CourierError(f"Courier request {method} {path} failed") from exc

        if not isinstance(payload, dict):
            raise CourierError(f"Unexpected courier payload for {method} {path}")
        return payload

    # -------------------------------------------------------------------
    # Courier port
    # -------------------------------------------------------------------
    def quote(self, pickup: Location, dropoff: Location) -> CourierQuote:
        body = {
            "pickup_address": _address_json(pickup),
            "dropoff_address": _address_json(dropoff),
            "pickup_latitude": pickup.latitude,
            "pickup_longitude": pickup.longitude,
        }
        if dropoff.latitude is not None and dropoff.longitude is not None:
            body["dropoff_latitude"] = dropoff.latitude
            body["dropoff_longitude"] = dropoff.longitude

        payload = self._request("POST", "/delivery_quotes", body)

        quote_id = payload.get("id")
        fee = payload.get("fee")
        if not quote_id or not isinstance(fee, int | float):
            raise CourierError("Courier quote is missing its id or fee")

        duration = payload.get("duration")
        return CourierQuote(
            quote_id=str(quote_id),
            fee_minor=int(fee),
            currency=str(payload.get("currency") or "BRL").upper(),
            expires_at=_parse_timestamp(payload.get("expires")),
            eta_minutes=duration if isinstance(duration, int) else None,
        )

    def create_delivery(self, manifest: DeliveryManifest) -> CourierDelivery:
        body = {
            "pickup_name": manifest.pickup_name,
            "pickup_address": _address_json(manifest.pickup),
            "pickup_phone_number": manifest.pickup_phone,
            "pickup_latitude": manifest.pickup.latitude,
            "pickup_longitude": manifest.pickup.longitude,
            "pickup_notes": manifest.pickup_notes,
            "dropoff_name": manifest.dropoff_name,
            "dropoff_address": _address_json(manifest.dropoff),
            "dropoff_phone_number": manifest.dropoff_phone,
            "dropoff_notes": manifest.dropoff_notes,
            "manifest_items": [
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "size": item.size,
                    "weight": item.weight_grams,
                    "dimensions": {
                        "length": item.length_cm,
                        "height": item.height_cm,
                        "depth": item.depth_cm,
                    },
                    "price": 0,
                    "must_be_upright": item.must_be_upright,
                }
                for item in manifest.items
            ],
            "external_id": manifest.external_id,
            "deliverable_action": "deliverable_action_meet_at_door",
        }
        if manifest.quote_id:
            body["quote_id"] = manifest.quote_id

        return _to_delivery(self._request("POST", "/deliveries", body))

    def delivery_status(self, delivery_id: str) -> CourierDelivery:
        return _to_delivery(self._request("GET", f"/deliveries/{delivery_id}"))

    def cancel(self, delivery_id: str) -> CourierDelivery:
        return _to_delivery(self._request("POST", f"/deliveries/{delivery_id}/cancel"))

    def close(self) -> None:
        self._client.close()
