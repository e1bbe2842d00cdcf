"""Order Status Tracker — the live order list seen by customers and staff.

The tracker subscribes to the order feed while mounted and re-queries its
rows on every change. It shows whatever status is stored; transition rules
live in the Order aggregate, not here.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ordering.order.order import Order, OrderStatus
from ordering.tracking.feed import OrderChange, OrderFeed, Subscription
from shared.queries import fetch_all

STATUS_LABELS = {
    "new": "Novo",
    "accepted": "Aceito",
    "in_production": "Em produção",
    "ready": "Pronto",
    "out_for_delivery": "A caminho",
    "delivered": "Entregue",
    "cancelled": "Cancelado",
}

PAYMENT_LABELS = {
    "paid": "Pago",
    "awaiting_payment": "Aguardando pagamento",
}


def status_label(status: str | None) -> str:
    return STATUS_LABELS.get(status or "", status or "")


@dataclass(frozen=True)
class OrderRow:
    order_id: str
    customer_id: str
    status: str
    status_label: str
    payment_status: str
    payment_label: str
    total: float
    delivery_type: str
    points_earned: int
    created_at: datetime | None
    courier_tracking_url: str | None = None

    @classmethod
    def from_order(cls, order) -> "OrderRow":
        return cls(
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            status=order.status,
            status_label=status_label(order.status),
            payment_status=order.payment_status,
            payment_label=PAYMENT_LABELS.get(order.payment_status, order.payment_status),
            total=order.total,
            delivery_type=order.delivery_type,
            points_earned=order.points_earned,
            created_at=order.created_at,
            courier_tracking_url=order.courier_tracking_url,
        )


def list_orders(customer_id: str | None = None, status: str | None = None) -> list:
    """Orders newest first, optionally narrowed to a customer and/or status."""
    filters = {}
    if customer_id:
        filters["customer_id"] = customer_id
    if status:
        filters["status"] = status
    return fetch_all(Order, order_by="-created_at", **filters)


def load_rows(customer_id: str | None = None) -> list[OrderRow]:
    return [OrderRow.from_order(order) for order in list_orders(customer_id=customer_id)]


def earned_points(rows) -> int:
    return sum(row.points_earned or 0 for row in rows if row.status != OrderStatus.CANCELLED.value)


def loyalty_balance(customer_id: str) -> int:
    """Points a customer holds: everything earned on orders that were not cancelled."""
    return earned_points(list_orders(customer_id=customer_id))


class OrderTracker:
    """Staff view when customer_id is None, otherwise one customer's orders."""

    def __init__(
        self,
        feed: OrderFeed,
        loader: Callable[[str | None], list[OrderRow]] = load_rows,
        customer_id: str | None = None,
    ) -> None:
        self.feed = feed
        self.loader = loader
        self.customer_id = customer_id
        self.rows: list[OrderRow] = []
        self.refreshes = 0
        self._subscription: Subscription | None = None

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    def mount(self) -> "OrderTracker":
        if self._subscription is None:
            self._subscription = self.feed.subscribe(self._on_change)
            self.refresh()
        return self

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def __enter__(self) -> "OrderTracker":
        return self.mount()

    def __exit__(self, *exc_info) -> None:
        self.unmount()

    def _on_change(self, change: OrderChange) -> None:
        if self.customer_id and change.customer_id and change.customer_id != self.customer_id:
            return
        self.refresh()

    @property
    def points(self) -> int:
        return earned_points(self.rows)

    def refresh(self) -> None:
        self.rows = self.loader(self.customer_id)
        self.refreshes += 1
