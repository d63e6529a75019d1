from django.contrib import admin

from checkout.infra.models import (
    CouponORM,
    CustomerORM,
    DeliverySlotORM,
    OrderDetailORM,
    OrderItemORM,
    OrderORM,
    ProductORM,
)


@admin.register(CustomerORM)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "created_at")
    search_fields = ("name",)


@admin.register(ProductORM)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "sku", "base_price", "stock_quantity", "is_active", "deleted_at")
    list_filter = ("is_active",)
    search_fields = ("name", "sku", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(CouponORM)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "discount_type", "value", "min_purchase", "expiry_date")
    list_filter = ("discount_type",)
    search_fields = ("code",)


@admin.register(DeliverySlotORM)
class DeliverySlotAdmin(admin.ModelAdmin):
    list_display = ("id", "start_time", "end_time", "additional_cost", "capacity_limit")


class OrderItemInline(admin.TabularInline):
    model = OrderItemORM
    extra = 0
    readonly_fields = ("product", "quantity", "unit_price")
    can_delete = False


class OrderDetailInline(admin.StackedInline):
    model = OrderDetailORM
    extra = 0
    can_delete = False


@admin.register(OrderORM)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "tracking_number", "customer", "status", "total_amount", "shipping_cost", "created_at")
    list_filter = ("status", "payment_method", "created_at")
    search_fields = ("tracking_number", "customer__name")
    readonly_fields = ("tracking_number", "total_amount", "shipping_cost")
    inlines = (OrderItemInline, OrderDetailInline)
