"""Tests for order totals: subtotal − discount + delivery fee."""

from decimal import Decimal

from ordering.checkout.pricing import price_order
from ordering.coupon.coupon import Coupon


def test_pickup_totals():
    totals = price_order(Decimal("150.00"))
    assert totals.total == Decimal("150.00")
    assert totals.delivery_fee == Decimal("0.00")
    assert totals.discount == Decimal("0.00")
    assert totals.points == 150


def test_delivery_fee_is_added():
    totals = price_order(Decimal("150.00"), Decimal("15.00"))
    assert totals.total == Decimal("165.00")
    assert totals.points == 165


def test_coupon_discount_comes_off_the_subtotal_only():
    coupon = Coupon.create(code="DEZ", percent_off=10)
    totals = price_order(Decimal("150.00"), Decimal("15.00"), coupon)
    assert totals.discount == Decimal("15.00")
    assert totals.total == Decimal("150.00")


def test_points_round_down():
    totals = price_order(Decimal("59.99"))
    assert totals.points == 59
