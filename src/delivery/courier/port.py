"""Courier port — abstract interface for on-demand delivery providers.

All courier adapters must implement this interface. Quoting, dispatch and
staff follow-up (status, cancel) program against the port; adapters are
swapped via configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from delivery.store import Location


class CourierError(Exception):
    """The courier provider failed: transport error, rejection or bad payload."""


@dataclass(frozen=True)
class CourierQuote:
    """A provider quote. Fees are in minor currency units (cents)."""

    quote_id: str
    fee_minor: int
    currency: str = "BRL"
    expires_at: datetime | None = None
    eta_minutes: int | None = None


@dataclass(frozen=True)
class ManifestItem:
    name: str
    quantity: int = 1
    size: str = "small"
    weight_grams: int = 1000
    length_cm: int = 30
    height_cm: int = 20
    depth_cm: int = 30
    must_be_upright: bool = True


@dataclass(frozen=True)
class DeliveryManifest:
    """Everything the courier needs to pick an order up and drop it off."""

    external_id: str
    pickup_name: str
    pickup_phone: str
    pickup: Location
    dropoff_name: str
    dropoff_phone: str
    dropoff: Location
    items: tuple[ManifestItem, ...] = field(default_factory=tuple)
    pickup_notes: str = ""
    dropoff_notes: str = ""
    quote_id: str | None = None


@dataclass(frozen=True)
class CourierDelivery:
    delivery_id: str
    status: str
    tracking_url: str | None = None
    fee_minor: int | None = None


class Courier(ABC):
    """Abstract interface for courier adapters."""

    @abstractmethod
    def quote(self, pickup: Location, dropoff: Location) -> CourierQuote:
        """Price a delivery from pickup to dropoff."""
        ...

    @abstractmethod
    def create_delivery(self, manifest: DeliveryManifest) -> CourierDelivery:
        """Book a courier for the manifest, honouring manifest.quote_id when set."""
        ...

    @abstractmethod
    def delivery_status(self, delivery_id: str) -> CourierDelivery:
        ...

    @abstractmethod
    def cancel(self, delivery_id: str) -> CourierDelivery:
        ...
