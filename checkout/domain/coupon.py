"""
Coupon value object and evaluation rules.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from checkout.domain.order import to_money


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class Coupon:
    """Read-only discount rule."""
    code: str
    discount_type: DiscountType
    value: Decimal
    min_purchase: Decimal | None = None
    expiry_date: date | None = None

    def is_expired(self, today: date) -> bool:
        """Expired only once the expiry date is strictly in the past."""
        return self.expiry_date is not None and self.expiry_date < today

    def meets_minimum(self, subtotal: Decimal) -> bool:
        return not self.min_purchase or subtotal >= self.min_purchase

    def calculate_discount(self, subtotal: Decimal) -> Decimal:
        if self.discount_type == DiscountType.PERCENTAGE:
            return to_money(subtotal * self.value / Decimal("100"))
        return to_money(self.value)


@dataclass(frozen=True)
class CouponEvaluation:
    valid: bool
    discount: Decimal
    message: str


def evaluate_coupon(coupon: Coupon | None, subtotal: Decimal, today: date) -> CouponEvaluation:
    """
    Check a coupon against a subtotal.

    The discount reported for a valid coupon never exceeds the subtotal.
    """
    if coupon is None:
        return CouponEvaluation(False, Decimal("0.00"), "Coupon not found")

    if coupon.is_expired(today):
        return CouponEvaluation(False, Decimal("0.00"), "Coupon has expired")

    if not coupon.meets_minimum(subtotal):
        return CouponEvaluation(
            False,
            Decimal("0.00"),
            f"Minimum purchase of {to_money(coupon.min_purchase)} required",
        )

    discount = min(coupon.calculate_discount(subtotal), to_money(subtotal))
    return CouponEvaluation(True, discount, "Coupon applied successfully")
