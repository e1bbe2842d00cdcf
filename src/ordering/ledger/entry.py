"""LedgerEntry aggregate — the shop's append-only cash book.

Entries are never edited or removed. Every placed order adds one credit;
staff record everything else (supplier purchases, manual sales) by hand.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering
from ordering.ledger.events import LedgerEntryRecorded


class EntryKind(Enum):
    CREDIT = "credit"
    DEBIT = "debit"


@ordering.aggregate
class LedgerEntry:
    kind = String(choices=EntryKind, required=True)
    amount = Float(required=True)
    description = String(required=True, max_length=255)
    payment_method = String(max_length=30)
    order_id = Identifier()
    recorded_at = DateTime()

    @invariant.post
    def amount_cannot_be_negative(self):
        if self.amount is not None and self.amount < 0:
            raise ValidationError({"amount": ["Ledger amounts cannot be negative"]})

    @classmethod
    def record(cls, kind, amount, description, payment_method=None, order_id=None):
        now = datetime.now(UTC)
        entry = cls(
            kind=kind,
            amount=amount,
            description=description,
            payment_method=payment_method,
            order_id=order_id,
            recorded_at=now,
        )
        entry.raise_(
            LedgerEntryRecorded(
                entry_id=str(entry.id),
                kind=kind,
                amount=amount,
                order_id=order_id,
                recorded_at=now,
            )
        )
        return entry

    @classmethod
    def credit_for_order(cls, order):
        return cls.record(
            kind=EntryKind.CREDIT.value,
            amount=order.total,
            description=f"Pedido #{str(order.id)[:8]}",
            payment_method=order.payment_method,
            order_id=str(order.id),
        )
