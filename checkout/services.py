"""
Application services for checkout, coupon validation and order queries.
"""
from __future__ import annotations

from collections import Counter
from decimal import Decimal, InvalidOperation
from typing import Callable
from uuid import UUID

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from checkout.domain.coupon import CouponEvaluation, evaluate_coupon
from checkout.domain.errors import (
    CheckoutError,
    CheckoutFailed,
    InsufficientStock,
    ProductNotFound,
    TrackingNumberExhausted,
)
from checkout.domain.order import CartRequest, OrderStatus, OrderTotals, generate_tracking_number, to_money
from checkout.infra.locks import product_stock_lock
from checkout.infra.models import OrderORM
from checkout.infra.pii_masker import mask_pii_in_dict
from checkout.infra.repositories import (
    CouponRepository,
    DeliverySlotRepository,
    OrderRepository,
    ProductRepository,
)
import logging


logger = logging.getLogger(__name__)


def default_tracking_generator() -> str:
    return generate_tracking_number(
        prefix=getattr(settings, "CHECKOUT_TRACKING_PREFIX", "MS-"),
        length=getattr(settings, "CHECKOUT_TRACKING_LENGTH", 10),
    )


class CouponService:
    """Service for coupon validation."""

    def __init__(self, coupon_repo: CouponRepository | None = None):
        self.coupon_repo = coupon_repo or CouponRepository()

    def evaluate(self, code: str, subtotal: Decimal) -> CouponEvaluation:
        """Validate a coupon code against a subtotal."""
        coupon = self.coupon_repo.get_by_code(code)
        return evaluate_coupon(coupon, to_money(subtotal), timezone.localdate())

    def discount_for(self, code: str | None, subtotal: Decimal) -> Decimal:
        """Best-effort discount: unknown, expired or ineligible coupons give zero."""
        if not code:
            return Decimal("0.00")
        evaluation = self.evaluate(code, subtotal)
        if not evaluation.valid:
            logger.info(
                "coupon_not_applied",
                extra={"coupon_code": code, "reason": evaluation.message},
            )
            return Decimal("0.00")
        return evaluation.discount


class CheckoutService:
    """Converts a cart into a persisted Order aggregate."""

    def __init__(
        self,
        order_repo: OrderRepository | None = None,
        product_repo: ProductRepository | None = None,
        slot_repo: DeliverySlotRepository | None = None,
        coupon_service: CouponService | None = None,
        tracking_generator: Callable[[], str] | None = None,
        max_tracking_attempts: int | None = None,
    ):
        self.order_repo = order_repo or OrderRepository()
        self.product_repo = product_repo or ProductRepository()
        self.slot_repo = slot_repo or DeliverySlotRepository()
        self.coupon_service = coupon_service or CouponService()
        self.tracking_generator = tracking_generator or default_tracking_generator
        if max_tracking_attempts is None:
            max_tracking_attempts = getattr(settings, "CHECKOUT_TRACKING_MAX_ATTEMPTS", 20)
        self.max_tracking_attempts = max_tracking_attempts

    def create_order(self, cart: CartRequest) -> OrderORM:
        """
        Create a pending order from a cart.

        Header, items, detail and every stock decrement are committed
        together or not at all. Raises a ``CheckoutError`` subclass on any
        failure; storage errors are wrapped in ``CheckoutFailed``.
        """
        logger.info(
            "checkout_started",
            extra=mask_pii_in_dict({
                "user_id": str(cart.customer_id),
                "items_count": len(cart.lines),
                "coupon_code": cart.coupon_code,
            }),
        )
        try:
            with transaction.atomic():
                order_id = self._place_order(cart)
        except CheckoutError as e:
            logger.warning(
                "checkout_failed",
                extra=mask_pii_in_dict({
                    "user_id": str(cart.customer_id),
                    "error": type(e).__name__,
                    "reason": e.reason,
                }),
            )
            raise
        except DatabaseError as e:
            logger.error(
                "checkout_failed",
                extra={"error": type(e).__name__, "reason": str(e)},
                exc_info=True,
            )
            raise CheckoutFailed("Order could not be stored") from e
        except InvalidOperation as e:
            logger.error(
                "checkout_failed",
                extra={"error": type(e).__name__, "reason": "amount out of range"},
                exc_info=True,
            )
            raise CheckoutFailed("Order total is out of range") from e

        order = self.order_repo.get_by_id(order_id)
        logger.info(
            "checkout_completed",
            extra={
                "order_id": order.id,
                "tracking_number": order.tracking_number,
                "total_amount": str(order.total_amount),
            },
        )
        return order

    def _place_order(self, cart: CartRequest) -> int:
        with product_stock_lock(line.product_id for line in cart.lines) as products:
            requested = Counter()
            for line in cart.lines:
                if line.product_id not in products:
                    raise ProductNotFound(line.product_id)
                requested[line.product_id] += line.quantity

            # Reject before pricing so oversized quantities never reach the totals.
            for product_id, quantity in requested.items():
                product = products[product_id]
                if quantity > product.stock_quantity:
                    raise InsufficientStock(
                        product_id=product.id,
                        product_name=product.name,
                        requested=quantity,
                        available=product.stock_quantity,
                    )

            subtotal = sum(
                (products[line.product_id].base_price * line.quantity for line in cart.lines),
                Decimal("0.00"),
            )

            discount = self.coupon_service.discount_for(cart.coupon_code, subtotal)
            shipping_cost, slot_id = self._shipping_cost(cart.delivery_slot_id)
            totals = OrderTotals(subtotal=subtotal, discount=discount, shipping_cost=shipping_cost)

            order = self.order_repo.create_header(
                customer_id=cart.customer_id,
                total_amount=totals.total_amount,
                shipping_cost=totals.shipping_cost,
                payment_method=cart.payment_method,
                tracking_number=self._allocate_tracking_number(),
                status=OrderStatus.PENDING,
            )

            for line in cart.lines:
                product = products[line.product_id]
                if not self.product_repo.decrement_stock(product.id, line.quantity):
                    current = self.product_repo.get_by_id(product.id)
                    raise InsufficientStock(
                        product_id=product.id,
                        product_name=product.name,
                        requested=line.quantity,
                        available=current.stock_quantity if current else 0,
                    )
                self.order_repo.add_item(order, product, line.quantity)

            self.order_repo.create_detail(
                order,
                recipient_name=cart.recipient_name,
                recipient_phone=cart.recipient_phone,
                delivery_date=cart.delivery_date,
                delivery_slot_id=slot_id,
                card_message=cart.card_message,
            )
            return order.id

    def _shipping_cost(self, slot_id: int | None) -> tuple[Decimal, int | None]:
        """Slot cost, or zero when no slot is given or it does not resolve."""
        if not slot_id:
            return Decimal("0.00"), None
        cost = self.slot_repo.get_additional_cost(slot_id)
        if cost is None:
            logger.info("delivery_slot_not_found", extra={"reason": f"slot {slot_id} missing"})
            return Decimal("0.00"), None
        return cost, slot_id

    def _allocate_tracking_number(self) -> str:
        for _ in range(self.max_tracking_attempts):
            tracking_number = self.tracking_generator()
            if not self.order_repo.exists_tracking_number(tracking_number):
                return tracking_number
        raise TrackingNumberExhausted(self.max_tracking_attempts)


class OrderService:
    """Read side of the Order aggregate."""

    def __init__(self, order_repo: OrderRepository | None = None):
        self.order_repo = order_repo or OrderRepository()

    def get_order(self, order_id: int) -> OrderORM | None:
        """Get order by ID."""
        return self.order_repo.get_by_id(order_id)

    def get_orders_by_customer(self, customer_id: UUID, limit: int | None = None, offset: int = 0) -> list[OrderORM]:
        """Get orders by customer with pagination."""
        if limit is None:
            limit = getattr(settings, "CHECKOUT_ORDERS_PAGE_SIZE", 15)
        return self.order_repo.get_by_customer(customer_id, limit=limit, offset=offset)
