"""
Checkout error taxonomy.

Every error carries a human-readable ``reason`` that is safe to return to
API callers.
"""
from __future__ import annotations


class CheckoutError(Exception):
    """Base class for checkout failures."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ProductNotFound(CheckoutError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStock(CheckoutError):
    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient stock for product: {product_name}")


class TrackingNumberExhausted(CheckoutError):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique tracking number after {attempts} attempts")


class CheckoutFailed(CheckoutError):
    """Wraps collaborator (storage) failures."""
