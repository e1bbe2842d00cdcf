"""Cart Store: the customer's basket, kept on their own device.

The cart is a plain object passed around explicitly. Every mutation writes
the whole cart through its storage and then notifies listeners so views
can re-render. Prices are captured when an item is added and are not
refreshed against the live catalogue.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from uuid import uuid4

import structlog
from protean.exceptions import ValidationError

from ordering.cart.storage import CartStorage
from shared.money import D, round_money

logger = structlog.get_logger(__name__)


@dataclass
class CartItem:
    line_id: str
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return round_money(self.unit_price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "line_id": self.line_id,
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": float(self.unit_price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            line_id=str(data["line_id"]),
            product_id=str(data["product_id"]),
            name=str(data["name"]),
            unit_price=round_money(data["unit_price"]),
            quantity=max(1, int(data.get("quantity", 1))),
        )


class CartStore:
    def __init__(self, storage: CartStorage, items: list[CartItem] | None = None) -> None:
        self.storage = storage
        self._items: list[CartItem] = list(items or [])
        self._listeners: list[Callable[["CartStore"], None]] = []

    # -------------------------------------------------------------------
    # Load / persist boundary
    # -------------------------------------------------------------------
    @classmethod
    def load(cls, storage: CartStorage) -> "CartStore":
        items = []
        for line in storage.load():
            try:
                items.append(CartItem.from_dict(line))
            except (KeyError, TypeError, ValueError, ArithmeticError):
                logger.warning("cart_line_discarded", line=line)
        return cls(storage, items)

    def persist(self) -> None:
        self.storage.save([item.to_dict() for item in self._items])

    def add_listener(self, listener: Callable[["CartStore"], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[["CartStore"], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self) -> None:
        self.persist()
        for listener in list(self._listeners):
            listener(self)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def subtotal(self) -> Decimal:
        return round_money(sum((item.unit_price * item.quantity for item in self._items), Decimal("0")))

    @property
    def total(self) -> Decimal:
        return self.subtotal

    def get(self, line_id: str) -> CartItem | None:
        return next((item for item in self._items if item.line_id == line_id), None)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, product, quantity: int = 1) -> CartItem:
        """Append a new line for the product. Identical products are never merged."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = CartItem(
            line_id=str(uuid4()),
            product_id=str(product.id),
            name=product.name,
            unit_price=round_money(D(product.price)),
            quantity=quantity,
        )
        self._items.append(item)
        self._changed()
        return item

    def update_quantity(self, line_id: str, delta: int) -> None:
        item = self.get(line_id)
        if item is None:
            return
        item.quantity = max(1, item.quantity + delta)
        self._changed()

    def remove(self, line_id: str) -> None:
        remaining = [item for item in self._items if item.line_id != line_id]
        if len(remaining) == len(self._items):
            return
        self._items = remaining
        self._changed()

    def clear(self) -> None:
        self._items = []
        self._changed()
