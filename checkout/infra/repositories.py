"""
Infrastructure repositories for checkout collaborators and the Order aggregate.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from django.db.models import F

from checkout.domain.coupon import Coupon, DiscountType
from checkout.domain.order import OrderStatus, PaymentMethod
from checkout.infra.models import (
    CouponORM,
    CustomerORM,
    DeliverySlotORM,
    OrderDetailORM,
    OrderItemORM,
    OrderORM,
    ProductORM,
)


class CustomerRepository:
    """Repository for Customer entities."""

    def get_by_id(self, customer_id: UUID | str) -> CustomerORM | None:
        """Get customer by ID."""
        return CustomerORM.objects.filter(id=customer_id).first()

    def create(self, name: str) -> UUID:
        """Create new customer."""
        new_customer = CustomerORM.objects.create(
            name=name,
        )
        return new_customer.id


class ProductRepository:
    """Catalog store: price and stock lookups, stock mutation."""

    def get_by_id(self, product_id: int) -> ProductORM | None:
        return ProductORM.objects.alive().filter(id=product_id).first()

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Atomically decrement stock if enough is available.

        Returns False when the conditional update matched no row, i.e. the
        product has fewer than ``quantity`` units left.
        """
        updated = (
            ProductORM.objects
            .filter(id=product_id, stock_quantity__gte=quantity)
            .update(stock_quantity=F("stock_quantity") - quantity)
        )
        return updated == 1


class CouponRepository:
    """Coupon store."""

    def get_by_code(self, code: str) -> Coupon | None:
        coupon_orm = CouponORM.objects.filter(code=code).first()
        if coupon_orm is None:
            return None
        return self._to_domain(coupon_orm)

    def _to_domain(self, coupon_orm: CouponORM) -> Coupon:
        return Coupon(
            code=coupon_orm.code,
            discount_type=DiscountType(coupon_orm.discount_type),
            value=coupon_orm.value,
            min_purchase=coupon_orm.min_purchase,
            expiry_date=coupon_orm.expiry_date,
        )


class DeliverySlotRepository:
    """Delivery-slot store."""

    def get_additional_cost(self, slot_id: int) -> Decimal | None:
        return (
            DeliverySlotORM.objects
            .filter(id=slot_id)
            .values_list("additional_cost", flat=True)
            .first()
        )


class OrderRepository:
    """Repository for Order aggregate."""

    def _aggregate_queryset(self):
        return (
            OrderORM.objects
            .alive()
            .select_related("customer", "detail", "detail__delivery_slot")
            .prefetch_related("items__product")
        )

    def get_by_id(self, order_id: int) -> OrderORM | None:
        """Get order by ID with items, detail and slot (no N+1)."""
        return self._aggregate_queryset().filter(id=order_id).first()

    def get_by_customer(self, customer_id: UUID, limit: int = 15, offset: int = 0) -> list[OrderORM]:
        """Get orders by customer, newest first."""
        return list(
            self._aggregate_queryset()
            .filter(customer_id=customer_id)
            .order_by("-created_at", "-id")[offset:offset + limit]
        )

    def exists_tracking_number(self, tracking_number: str) -> bool:
        # Soft-deleted orders keep their tracking numbers.
        return OrderORM.objects.filter(tracking_number=tracking_number).exists()

    def create_header(
        self,
        customer_id: UUID,
        total_amount: Decimal,
        shipping_cost: Decimal,
        payment_method: PaymentMethod | None,
        tracking_number: str,
        status: OrderStatus = OrderStatus.PENDING,
    ) -> OrderORM:
        return OrderORM.objects.create(
            customer_id=customer_id,
            status=status.value,
            total_amount=total_amount,
            shipping_cost=shipping_cost,
            payment_method=payment_method.value if payment_method else None,
            tracking_number=tracking_number,
        )

    def add_item(self, order: OrderORM, product: ProductORM, quantity: int) -> OrderItemORM:
        """Create an item with the product's current price as snapshot."""
        return OrderItemORM.objects.create(
            order=order,
            product=product,
            quantity=quantity,
            unit_price=product.base_price,
        )

    def create_detail(
        self,
        order: OrderORM,
        recipient_name: str,
        recipient_phone: str,
        delivery_date: date,
        delivery_slot_id: int | None,
        card_message: str | None,
    ) -> OrderDetailORM:
        return OrderDetailORM.objects.create(
            order=order,
            recipient_name=recipient_name,
            recipient_phone=recipient_phone,
            delivery_date=delivery_date,
            delivery_slot_id=delivery_slot_id,
            card_message=card_message,
        )
