"""Fake courier adapter — deterministic courier for testing and development.

Issues mock quotes and deliveries without any external calls. Quoting and
dispatch can be made to fail independently.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from delivery.courier.port import (
    Courier,
    CourierDelivery,
    CourierError,
    CourierQuote,
    DeliveryManifest,
)
from delivery.store import Location


class FakeCourier(Courier):
    """Fake courier that always succeeds by default."""

    def __init__(self) -> None:
        self.fee_minor = 1500
        self.quote_fails = False
        self.dispatch_fails = False
        self.failure_reason = "Courier unavailable"
        self.deliveries: dict[str, CourierDelivery] = {}
        self.calls: list[dict] = []

    def configure(
        self,
        fee_minor: int = 1500,
        quote_fails: bool = False,
        dispatch_fails: bool = False,
        failure_reason: str = "Courier unavailable",
    ) -> None:
        """Configure the fake courier behavior for testing."""
        self.fee_minor = fee_minor
        self.quote_fails = quote_fails
        self.dispatch_fails = dispatch_fails
        self.failure_reason = failure_reason

    def quote(self, pickup: Location, dropoff: Location) -> CourierQuote:
        self.calls.append({"method": "quote", "pickup": pickup, "dropoff": dropoff})
        if self.quote_fails:
            raise CourierError(self.failure_reason)

        return CourierQuote(
            quote_id=f"fake_quote_{uuid4().hex[:12]}",
            fee_minor=self.fee_minor,
            expires_at=datetime.now(UTC) + timedelta(minutes=15),
            eta_minutes=45,
        )

    def create_delivery(self, manifest: DeliveryManifest) -> CourierDelivery:
        self.calls.append({"method": "create_delivery", "manifest": manifest})
        if self.dispatch_fails:
            raise CourierError(self.failure_reason)

        delivery_id = f"fake_del_{uuid4().hex[:12]}"
        delivery = CourierDelivery(
            delivery_id=delivery_id,
            status="pending",
            tracking_url=f"https://fake-courier.example.com/track/{delivery_id}",
            fee_minor=self.fee_minor,
        )
        self.deliveries[delivery_id] = delivery
        return delivery

    def delivery_status(self, delivery_id: str) -> CourierDelivery:
        self.calls.append({"method": "delivery_status", "delivery_id": delivery_id})
        if delivery_id not in self.deliveries:
            raise CourierError(f"Unknown delivery {delivery_id}")
        return self.deliveries[delivery_id]

    def cancel(self, delivery_id: str) -> CourierDelivery:
        self.calls.append({"method": "cancel", "delivery_id": delivery_id})
        current = self.delivery_status(delivery_id)
        cancelled = CourierDelivery(
            delivery_id=delivery_id,
            status="canceled",
            tracking_url=current.tracking_url,
            fee_minor=current.fee_minor,
        )
        self.deliveries[delivery_id] = cancelled
        return cancelled
