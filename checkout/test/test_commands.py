"""
Tests for management commands.
"""
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from checkout.domain.coupon import DiscountType
from checkout.infra.models import CouponORM, CustomerORM, DeliverySlotORM, ProductORM


class SeedCatalogCommandTest(TestCase):

    def seed(self, *args):
        out = StringIO()
        call_command("seed_catalog", *args, stdout=out)
        return out.getvalue()

    def test_seeds_catalog(self):
        output = self.seed()

        self.assertIn("Seeded 3 products, 2 coupons, 3 slots", output)
        self.assertEqual(ProductORM.objects.count(), 3)
        self.assertEqual(DeliverySlotORM.objects.count(), 3)
        save10 = CouponORM.objects.get(code="SAVE10")
        self.assertEqual(save10.discount_type, DiscountType.PERCENTAGE.value)
        self.assertEqual(save10.value, Decimal("10.00"))
        welcome = CouponORM.objects.get(code="WELCOME5")
        self.assertEqual(welcome.min_purchase, Decimal("30.00"))
        self.assertTrue(CustomerORM.objects.filter(name="Demo Customer").exists())

    def test_running_twice_does_not_duplicate(self):
        self.seed()
        ProductORM.objects.filter(sku="RR-001").update(stock_quantity=0)

        self.seed()

        self.assertEqual(ProductORM.objects.count(), 3)
        self.assertEqual(CouponORM.objects.count(), 2)
        self.assertEqual(DeliverySlotORM.objects.count(), 3)
        self.assertEqual(CustomerORM.objects.count(), 1)
        self.assertEqual(ProductORM.objects.get(sku="RR-001").stock_quantity, 25)

    def test_customer_name_option(self):
        self.seed("--customer-name", "Florist")
        self.assertTrue(CustomerORM.objects.filter(name="Florist").exists())
