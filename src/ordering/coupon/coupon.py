"""Coupon aggregate — discount codes handed out by the shop.

A coupon takes a percentage off the cart subtotal, a flat amount off, or
both (percentage first). The discount never exceeds the subtotal.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Date, DateTime, Float, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from shared.money import D, round_money


def normalize_code(code):
    return (code or "").strip().upper()


@ordering.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    percent_off = Integer(min_value=1, max_value=100)
    flat_off = Float(min_value=0.01)
    minimum_spend = Float(min_value=0.0)
    expires_on = Date()
    active = Boolean(default=True)
    created_at = DateTime()

    @invariant.post
    def must_offer_a_discount(self):
        if not self.percent_off and not self.flat_off:
            raise ValidationError({"coupon": ["A coupon needs a percentage or a flat discount"]})

    @invariant.post
    def code_is_upper_case(self):
        if self.code and self.code != normalize_code(self.code):
            raise ValidationError({"code": ["Coupon codes are stored in upper case"]})

    @classmethod
    def create(cls, code, percent_off=None, flat_off=None, minimum_spend=None, expires_on=None):
        return cls(
            code=normalize_code(code),
            percent_off=percent_off,
            flat_off=flat_off,
            minimum_spend=minimum_spend,
            expires_on=expires_on,
            active=True,
            created_at=datetime.now(UTC),
        )

    def update(self, percent_off=None, flat_off=None, minimum_spend=None, expires_on=None, active=None):
        with atomic_change(self):
            if percent_off is not None:
                self.percent_off = percent_off or None
            if flat_off is not None:
                self.flat_off = flat_off or None
            if minimum_spend is not None:
                self.minimum_spend = minimum_spend
            if expires_on is not None:
                self.expires_on = expires_on
            if active is not None:
                self.active = active

    def deactivate(self):
        self.active = False

    def is_expired(self, today: date | None = None) -> bool:
        if self.expires_on is None:
            return False
        return (today or date.today()) > self.expires_on

    def discount_for(self, subtotal, today: date | None = None) -> Decimal:
        """Discount this coupon grants on the given subtotal.

        Raises ValidationError when the coupon cannot be used.
        """
        subtotal = round_money(subtotal)

        if not self.active:
            raise ValidationError({"coupon_code": [f"Coupon {self.code} is no longer active"]})
        if self.is_expired(today):
            raise ValidationError({"coupon_code": [f"Coupon {self.code} expired on {self.expires_on}"]})
        if self.minimum_spend and subtotal < round_money(self.minimum_spend):
            raise ValidationError(
                {"coupon_code": [f"Coupon {self.code} requires a minimum spend of {round_money(self.minimum_spend)}"]}
            )

        discount = Decimal("0")
        if self.percent_off:
            discount += subtotal * Decimal(self.percent_off) / 100
        if self.flat_off:
            discount += D(self.flat_off)
        return round_money(min(discount, subtotal))


def find_coupon(code):
    """Look a coupon up by code, case-insensitively."""
    normalized = normalize_code(code)
    coupons = current_domain.repository_for(Coupon)._dao.query.filter(code=normalized).all().items
    if not coupons:
        raise ObjectNotFoundError({"coupon_code": [f"Coupon {normalized} does not exist"]})
    return coupons[0]
