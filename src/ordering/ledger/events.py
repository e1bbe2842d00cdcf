"""Domain events for the LedgerEntry aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="LedgerEntry")
class LedgerEntryRecorded:
    """Money came in (credit) or went out (debit)."""

    __version__ = 1

    entry_id = Identifier(required=True)
    kind = String(required=True)
    amount = Float(required=True)
    order_id = Identifier()
    recorded_at = DateTime(required=True)
