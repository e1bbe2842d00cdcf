"""Order totals: subtotal − coupon discount + delivery fee."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ordering.order.order import loyalty_points
from shared.money import round_money


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    delivery_fee: Decimal
    total: Decimal
    points: int


def price_order(subtotal, delivery_fee=Decimal("0"), coupon=None, today: date | None = None) -> OrderTotals:
    subtotal = round_money(subtotal)
    delivery_fee = round_money(delivery_fee)
    discount = coupon.discount_for(subtotal, today) if coupon is not None else Decimal("0.00")
    total = round_money(subtotal - discount + delivery_fee)
    return OrderTotals(
        subtotal=subtotal,
        discount=round_money(discount),
        delivery_fee=delivery_fee,
        total=total,
        points=loyalty_points(total),
    )
