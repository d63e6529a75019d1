"""
Management command to seed demo catalog data for local checkout runs.
"""
from datetime import time
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from checkout.domain.coupon import DiscountType
from checkout.infra.models import CouponORM, CustomerORM, DeliverySlotORM, ProductORM

PRODUCTS = (
    ("Red Roses Bouquet", "red-roses-bouquet", "RR-001", Decimal("45.00"), 25),
    ("Sunflower Basket", "sunflower-basket", "SF-002", Decimal("32.50"), 10),
    ("Orchid Pot", "orchid-pot", "OR-003", Decimal("60.00"), 5),
)

COUPONS = (
    ("SAVE10", DiscountType.PERCENTAGE, Decimal("10.00"), None),
    ("WELCOME5", DiscountType.FIXED, Decimal("5.00"), Decimal("30.00")),
)

SLOTS = (
    (time(9, 0), time(12, 0), Decimal("0.00")),
    (time(12, 0), time(15, 0), Decimal("5.00")),
    (time(18, 0), time(21, 0), Decimal("8.50")),
)


class Command(BaseCommand):
    help = 'Create demo products, coupons, delivery slots and a customer'

    def add_arguments(self, parser):
        parser.add_argument(
            '--customer-name',
            default='Demo Customer',
            help='Name of the demo customer to create',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        for name, slug, sku, price, stock in PRODUCTS:
            ProductORM.objects.update_or_create(
                sku=sku,
                defaults={"name": name, "slug": slug, "base_price": price, "stock_quantity": stock},
            )

        for code, discount_type, value, min_purchase in COUPONS:
            CouponORM.objects.update_or_create(
                code=code,
                defaults={"discount_type": discount_type.value, "value": value, "min_purchase": min_purchase},
            )

        for start, end, cost in SLOTS:
            DeliverySlotORM.objects.get_or_create(start_time=start, end_time=end, defaults={"additional_cost": cost})

        customer, _ = CustomerORM.objects.get_or_create(name=options['customer_name'])

        self.stdout.write(
            self.style.SUCCESS(
                f'Seeded {len(PRODUCTS)} products, {len(COUPONS)} coupons, {len(SLOTS)} slots; '
                f'customer id {customer.id}'
            )
        )
