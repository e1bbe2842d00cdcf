"""Order change feed — publish/subscribe channel scoped to orders.

Subscribers get an OrderChange for every insert or update of an order.
subscribe() hands back a Subscription; cancelling it (or leaving its
``with`` block) stops delivery.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderChange:
    kind: str
    order_id: str
    customer_id: str | None = None
    status: str | None = None


Listener = Callable[[OrderChange], None]


class Subscription:
    def __init__(self, feed: "OrderFeed", listener: Listener) -> None:
        self._feed = feed
        self.listener = listener
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


class OrderFeed:
    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Subscription:
        subscription = Subscription(self, listener)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, change: OrderChange) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            if not subscription.active:
                continue
            try:
                subscription.listener(change)
            except Exception:
                # One broken view must not stop the others from refreshing
                logger.exception("order_feed_listener_failed", order_id=change.order_id, kind=change.kind)


_feed_instance: OrderFeed | None = None


def get_feed() -> OrderFeed:
    """Return the process-wide order feed the domain publishes into."""
    global _feed_instance
    if _feed_instance is None:
        _feed_instance = OrderFeed()
    return _feed_instance


def reset_feed() -> None:
    """Drop every subscription (useful for tests)."""
    global _feed_instance
    _feed_instance = None
