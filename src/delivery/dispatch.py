"""Courier Dispatcher: books a courier for a confirmed ship order.

Dispatch failures never undo the order. They are logged and the shop
coordinates the delivery by hand.
"""

from dataclasses import dataclass

import structlog

from delivery.address.port import DeliveryAddress
from delivery.courier.port import Courier, CourierError, DeliveryManifest, ManifestItem
from delivery.phone import normalize_phone
from delivery.store import Store, load_store

logger = structlog.get_logger(__name__)

PACKAGE_ITEM = ManifestItem(name="Doces Tarsi Sweet")
DROPOFF_NOTES = "Entregar na portaria se não atender"


@dataclass(frozen=True)
class Recipient:
    name: str
    phone: str


@dataclass(frozen=True)
class DispatchResult:
    delivery_id: str
    tracking_url: str | None = None


def _dropoff_address(order) -> DeliveryAddress:
    address = order.delivery_address
    return DeliveryAddress(
        postal_code=address.postal_code,
        street=address.street,
        number=address.number,
        district=address.district or "",
        city=address.city or "",
        region=address.region or "",
        complement=address.complement or "",
    )


def _pickup_notes(order) -> str:
    lines = ", ".join(f"{item.quantity}x {item.name}" for item in order.items)
    return f"Pedido #{str(order.id)[:8]}: {lines}"


class CourierDispatcher:
    def __init__(self, courier: Courier, store: Store | None = None) -> None:
        self.courier = courier
        self.store = store or load_store()

    def build_manifest(self, order, quote_id: str | None, recipient: Recipient) -> DeliveryManifest:
        return DeliveryManifest(
            external_id=str(order.id),
            pickup_name=self.store.name,
            pickup_phone=self.store.phone,
            pickup=self.store.location,
            dropoff_name=recipient.name,
            dropoff_phone=normalize_phone(recipient.phone),
            dropoff=_dropoff_address(order).to_location(),
            items=(PACKAGE_ITEM,),
            pickup_notes=_pickup_notes(order),
            dropoff_notes=DROPOFF_NOTES,
            quote_id=quote_id,
        )

    def dispatch(self, order, quote_id: str | None, recipient: Recipient) -> DispatchResult | None:
        """Request a courier job. Returns None when the courier could not be booked."""
        if order.delivery_address is None:
            logger.warning("courier_dispatch_skipped", order_id=str(order.id), reason="no delivery address")
            return None

        manifest = self.build_manifest(order, quote_id, recipient)
        try:
            delivery = self.courier.create_delivery(manifest)
        except CourierError as exc:
            logger.error(
                "courier_dispatch_failed",
                order_id=str(order.id),
                quote_id=quote_id,
                error=str(exc),
            )
            return None

        logger.info(
            "courier_dispatched",
            order_id=str(order.id),
            delivery_id=delivery.delivery_id,
            status=delivery.status,
        )
        return DispatchResult(delivery_id=delivery.delivery_id, tracking_url=delivery.tracking_url)
