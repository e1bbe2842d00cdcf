from dataclasses import dataclass
from decimal import Decimal

from ordering.ledger.entry import EntryKind, LedgerEntry
from shared.money import D, round_money
from shared.queries import fetch_all


@dataclass(frozen=True)
class CashSummary:
    credits: Decimal
    debits: Decimal

    @property
    def balance(self) -> Decimal:
        return round_money(self.credits - self.debits)


def summarize(entries) -> CashSummary:
    credits = sum((D(e.amount) for e in entries if e.kind == EntryKind.CREDIT.value), Decimal("0"))
    debits = sum((D(e.amount) for e in entries if e.kind == EntryKind.DEBIT.value), Decimal("0"))
    return CashSummary(credits=round_money(credits), debits=round_money(debits))


def list_entries(kind=None):
    """Ledger entries, newest first."""
    filters = {"kind": kind} if kind else {}
    return fetch_all(LedgerEntry, order_by="-recorded_at", **filters)
