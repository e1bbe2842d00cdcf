"""Delivery Quoter: prices a delivery from the store to the customer.

Provider fees arrive in cents. When the provider cannot quote, checkout
continues with a fixed default fee and a warning instead of failing.
"""

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

import structlog
from protean.exceptions import ValidationError

from delivery.address.port import DeliveryAddress
from delivery.courier.port import Courier, CourierError
from delivery.store import Store, load_store
from shared.money import D, from_minor_units, round_money

logger = structlog.get_logger(__name__)

DEFAULT_DELIVERY_FEE = Decimal("15.00")
FALLBACK_WARNING = "Could not quote this delivery; the standard delivery fee applies."


class IncompleteAddress(ValidationError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__({field: ["This field is required to quote a delivery"] for field in missing})
        self.missing = missing


@dataclass(frozen=True)
class DeliveryQuote:
    fee: Decimal
    quote_id: str | None = None
    expires_at: datetime | None = None
    fallback: bool = False
    warning: str | None = None

    def __post_init__(self) -> None:
        # Quotes posted back by clients may carry a naive timestamp; read it as UTC
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            object.__setattr__(self, "expires_at", self.expires_at.replace(tzinfo=UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at


def default_delivery_fee() -> Decimal:
    return round_money(D(os.environ.get("DEFAULT_DELIVERY_FEE", DEFAULT_DELIVERY_FEE)))


class DeliveryQuoter:
    def __init__(self, courier: Courier, store: Store | None = None, default_fee=None) -> None:
        self.courier = courier
        self.store = store or load_store()
        self.default_fee = round_money(default_fee) if default_fee is not None else default_delivery_fee()

    def quote(self, address: DeliveryAddress) -> DeliveryQuote:
        missing = [name for name in ("street", "number") if not (getattr(address, name) or "").strip()]
        if missing:
            raise IncompleteAddress(missing)

        try:
            provider_quote = self.courier.quote(self.store.location, address.to_location())
        except CourierError as exc:
            logger.warning(
                "delivery_quote_fallback",
                postal_code=address.postal_code,
                default_fee=str(self.default_fee),
                error=str(exc),
            )
            return DeliveryQuote(fee=self.default_fee, fallback=True, warning=FALLBACK_WARNING)

        fee = from_minor_units(provider_quote.fee_minor)
        logger.info(
            "delivery_quoted",
            quote_id=provider_quote.quote_id,
            fee=str(fee),
            postal_code=address.postal_code,
        )
        return DeliveryQuote(
            fee=fee,
            quote_id=provider_quote.quote_id,
            expires_at=provider_quote.expires_at,
        )
