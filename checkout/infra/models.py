from __future__ import annotations

from uuid import uuid4

from django.core.validators import MinValueValidator
from django.db import models

from checkout.domain.coupon import DiscountType
from checkout.domain.order import OrderStatus, PaymentMethod


STATUS_CHOICES = (
    (OrderStatus.PENDING.value, "Pending"),
    (OrderStatus.PROCESSING.value, "Processing"),
    (OrderStatus.SHIPPED.value, "Shipped"),
    (OrderStatus.DELIVERED.value, "Delivered"),
    (OrderStatus.CANCELLED.value, "Cancelled"),
)

PAYMENT_METHOD_CHOICES = (
    (PaymentMethod.CASH.value, "Cash"),
    (PaymentMethod.CARD.value, "Card"),
    (PaymentMethod.TRANSFER.value, "Bank transfer"),
)

DISCOUNT_TYPE_CHOICES = (
    (DiscountType.PERCENTAGE.value, "Percentage"),
    (DiscountType.FIXED.value, "Fixed amount"),
)


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)


class CustomerORM(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    name = models.CharField(max_length=255)

    def __str__(self):
        return self.name


class ProductORM(TimeStampedModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    sku = models.CharField(max_length=64, unique=True)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.TextField(blank=True, default="")
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=("is_active",), name="product_is_active_idx"),
        ]

    def __str__(self):
        return self.name


class CouponORM(TimeStampedModel):
    code = models.CharField(max_length=64, unique=True)
    discount_type = models.CharField(max_length=16, choices=DISCOUNT_TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2)
    min_purchase = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)

    def __str__(self):
        return self.code


class DeliverySlotORM(TimeStampedModel):
    start_time = models.TimeField()
    end_time = models.TimeField()
    additional_cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    capacity_limit = models.PositiveIntegerField(null=True, blank=True)

    def __str__(self):
        return f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"


class OrderORM(TimeStampedModel):
    customer = models.ForeignKey(
        CustomerORM,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=OrderStatus.PENDING.value)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    payment_method = models.CharField(max_length=16, choices=PAYMENT_METHOD_CHOICES, null=True, blank=True)
    tracking_number = models.CharField(max_length=32, unique=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=("customer", "status"), name="order_customer_status_idx"),
            models.Index(fields=("customer", "-created_at"), name="order_customer_created_idx"),
        ]

    def __str__(self):
        return self.tracking_number


class OrderItemORM(TimeStampedModel):
    order = models.ForeignKey(
        OrderORM,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        ProductORM,
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)


class OrderDetailORM(TimeStampedModel):
    order = models.OneToOneField(
        OrderORM,
        on_delete=models.CASCADE,
        related_name="detail",
    )
    recipient_name = models.CharField(max_length=255)
    recipient_phone = models.CharField(max_length=20)
    delivery_date = models.DateField()
    delivery_slot = models.ForeignKey(
        DeliverySlotORM,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_details",
    )
    card_message = models.CharField(max_length=500, null=True, blank=True)
