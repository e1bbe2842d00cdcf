"""Manual cash-book entries: command and handler."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.ledger.entry import LedgerEntry


@ordering.command(part_of="LedgerEntry")
class RecordLedgerEntry:
    kind = String(required=True, max_length=10)
    amount = Float(required=True, min_value=0.01)
    description = String(required=True, max_length=255)
    payment_method = String(max_length=30)
    order_id = Identifier()


@ordering.command_handler(part_of=LedgerEntry)
class RecordLedgerEntryHandler:
    @handle(RecordLedgerEntry)
    def record_entry(self, command):
        entry = LedgerEntry.record(
            kind=command.kind,
            amount=command.amount,
            description=command.description,
            payment_method=command.payment_method,
            order_id=command.order_id,
        )
        current_domain.repository_for(LedgerEntry).add(entry)
        return str(entry.id)
