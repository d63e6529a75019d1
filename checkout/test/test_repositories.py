"""
Tests for infrastructure repositories and helpers.
"""
from decimal import Decimal

from django.db import transaction
from django.test import SimpleTestCase, TestCase

from checkout.domain.coupon import DiscountType
from checkout.infra.locks import product_stock_lock
from checkout.infra.pii_masker import mask_name, mask_phone, mask_pii_in_dict
from checkout.infra.repositories import (
    CouponRepository,
    DeliverySlotRepository,
    ProductRepository,
)
from checkout.test.factories import make_coupon, make_product, make_slot


class ProductRepositoryTest(TestCase):

    def setUp(self):
        self.repo = ProductRepository()

    def test_decrement_with_enough_stock(self):
        product = make_product(stock=5)
        self.assertTrue(self.repo.decrement_stock(product.id, 5))
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 0)

    def test_decrement_never_goes_negative(self):
        product = make_product(stock=2)
        self.assertFalse(self.repo.decrement_stock(product.id, 3))
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 2)

    def test_lock_returns_existing_products_only(self):
        product = make_product()
        with transaction.atomic(), product_stock_lock([product.id, 987654]) as products:
            self.assertEqual(set(products), {product.id})


class ProductLockOutsideTransactionTest(SimpleTestCase):

    def test_lock_requires_atomic_block(self):
        with self.assertRaises(RuntimeError):
            with product_stock_lock([1]):
                pass


class CouponRepositoryTest(TestCase):

    def test_maps_to_domain(self):
        make_coupon(code="FIVE", discount_type="fixed", value="5.00", min_purchase="20.00")
        coupon = CouponRepository().get_by_code("FIVE")
        self.assertEqual(coupon.discount_type, DiscountType.FIXED)
        self.assertEqual(coupon.value, Decimal("5.00"))
        self.assertEqual(coupon.min_purchase, Decimal("20.00"))

    def test_missing_code(self):
        self.assertIsNone(CouponRepository().get_by_code("NOPE"))


class DeliverySlotRepositoryTest(TestCase):

    def test_cost_lookup(self):
        slot = make_slot(additional_cost="3.25")
        repo = DeliverySlotRepository()
        self.assertEqual(repo.get_additional_cost(slot.id), Decimal("3.25"))
        self.assertIsNone(repo.get_additional_cost(slot.id + 1000))


class PiiMaskerTest(SimpleTestCase):

    def test_mask_phone(self):
        self.assertEqual(mask_phone("+1234567890"), "+1*******90")

    def test_mask_name(self):
        self.assertEqual(mask_name("Maria Garcia"), "M***a G****a")

    def test_mask_dict(self):
        masked = mask_pii_in_dict({
            "recipient_phone": "+1234567890",
            "card_message": "secret",
            "user_id": "6f1c2d3e-4b5a-4c6d-8e7f-9a0b1c2d3e4f",
            "items_count": 2,
        })
        self.assertEqual(masked["card_message"], "[redacted]")
        self.assertEqual(masked["user_id"], "6f1c2d3e-****-****-****-************")
        self.assertEqual(masked["items_count"], 2)
