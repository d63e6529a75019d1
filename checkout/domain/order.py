"""
Domain model for the checkout cart and Order aggregate.
"""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import UUID

CENTS = Decimal("0.01")
TRACKING_ALPHABET = string.ascii_uppercase + string.digits


def to_money(value) -> Decimal:
    """Quantize a numeric value to a 2-decimal currency amount."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class OrderStatus(str, Enum):
    """Order status enumeration."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class CartLine:
    """Requested product and quantity."""
    product_id: int
    quantity: int

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("Quantity must be an integer")
        if self.quantity <= 0:
            raise ValueError("Quantity must be positive")


@dataclass(frozen=True)
class CartRequest:
    """Checkout input. Transient, never persisted as-is."""
    customer_id: UUID
    lines: tuple[CartLine, ...]
    recipient_name: str
    recipient_phone: str
    delivery_date: date
    coupon_code: str | None = None
    delivery_slot_id: int | None = None
    card_message: str | None = None
    payment_method: PaymentMethod | None = None

    def __post_init__(self):
        if not self.lines:
            raise ValueError("Cart must contain at least one item")
        object.__setattr__(self, "lines", tuple(self.lines))


@dataclass(frozen=True)
class OrderTotals:
    """
    Monetary breakdown of an order.

    The discount is clamped to ``[0, subtotal]`` so the total never goes
    negative, even for a fixed coupon larger than the subtotal.
    """
    subtotal: Decimal
    discount: Decimal = Decimal("0.00")
    shipping_cost: Decimal = Decimal("0.00")
    applied_discount: Decimal = field(init=False)

    def __post_init__(self):
        subtotal = to_money(self.subtotal)
        discount = min(max(to_money(self.discount), Decimal("0.00")), subtotal)
        object.__setattr__(self, "subtotal", subtotal)
        object.__setattr__(self, "shipping_cost", to_money(self.shipping_cost))
        object.__setattr__(self, "applied_discount", discount)

    @property
    def total_amount(self) -> Decimal:
        return self.subtotal - self.applied_discount + self.shipping_cost


def generate_tracking_number(prefix: str = "MS-", length: int = 10) -> str:
    """Random tracking number: prefix followed by uppercase alphanumerics."""
    return prefix + "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(length))
