"""
Integration tests for the REST and GraphQL APIs.
"""
import json
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from checkout.infra.models import OrderORM
from checkout.test.factories import make_coupon, make_customer, make_product, make_slot


class ApiTestCase(TestCase):

    def setUp(self):
        self.customer = make_customer()
        self.product = make_product(price="10.00", stock=5, name="Red Roses")
        self.headers = {"HTTP_X_USER_ID": str(self.customer.id)}

    def cart_payload(self, **overrides):
        payload = {
            "items": [{"product_id": self.product.id, "quantity": 2}],
            "recipient_name": "Maria Garcia",
            "recipient_phone": "+1234567890",
            "delivery_date": (timezone.localdate() + timedelta(days=2)).isoformat(),
        }
        payload.update(overrides)
        return payload

    def post_json(self, path, payload, **headers):
        return self.client.post(
            path,
            data=json.dumps(payload),
            content_type="application/json",
            **(headers or self.headers),
        )


class CreateOrderApiTest(ApiTestCase):
    """POST /api/orders"""

    def test_created(self):
        slot = make_slot(additional_cost="5.00")
        response = self.post_json(
            "/api/orders",
            self.cart_payload(delivery_slot_id=slot.id, payment_method="cash", card_message="Hi"),
        )

        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["total_amount"], "25.00")
        self.assertEqual(data["shipping_cost"], "5.00")
        self.assertEqual(data["payment_method"], "cash")
        self.assertRegex(data["tracking_number"], r"^MS-[A-Z0-9]{10}$")
        self.assertEqual(data["items"][0]["product_name"], "Red Roses")
        self.assertEqual(data["items"][0]["unit_price"], "10.00")
        self.assertEqual(data["detail"]["delivery_slot"]["id"], slot.id)
        self.assertEqual(data["detail"]["card_message"], "Hi")

    def test_insufficient_stock_is_422(self):
        response = self.post_json(
            "/api/orders",
            self.cart_payload(items=[{"product_id": self.product.id, "quantity": 6}]),
        )

        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            response.json(),
            {"message": "Failed to create order", "error": "Insufficient stock for product: Red Roses"},
        )
        self.assertFalse(OrderORM.objects.exists())

    def test_oversized_quantity_is_422(self):
        response = self.post_json(
            "/api/orders",
            self.cart_payload(items=[{"product_id": self.product.id, "quantity": 10 ** 30}]),
        )

        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            response.json(),
            {"message": "Failed to create order", "error": "Insufficient stock for product: Red Roses"},
        )
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_unknown_product_is_422(self):
        response = self.post_json(
            "/api/orders",
            self.cart_payload(items=[{"product_id": 999999, "quantity": 1}]),
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["message"], "Failed to create order")

    def test_validation_errors(self):
        response = self.post_json(
            "/api/orders",
            self.cart_payload(
                items=[{"product_id": self.product.id, "quantity": 0}],
                delivery_date=timezone.localdate().isoformat(),
                payment_method="bitcoin",
                recipient_phone="1" * 21,
            ),
        )

        self.assertEqual(response.status_code, 422)
        errors = response.json()["errors"]
        self.assertIn("items.0.quantity", errors)
        self.assertIn("delivery_date", errors)
        self.assertIn("payment_method", errors)
        self.assertIn("recipient_phone", errors)

    def test_empty_items(self):
        response = self.post_json("/api/orders", self.cart_payload(items=[]))
        self.assertEqual(response.status_code, 422)
        self.assertIn("items", response.json()["errors"])

    def test_invalid_json(self):
        response = self.client.post(
            "/api/orders",
            data="{not json",
            content_type="application/json",
            **self.headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_missing_user_header_is_401(self):
        response = self.client.post(
            "/api/orders",
            data=json.dumps(self.cart_payload()),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 401)

    def test_unknown_user_is_401(self):
        response = self.post_json(
            "/api/orders",
            self.cart_payload(),
            HTTP_X_USER_ID="00000000-0000-0000-0000-000000000000",
        )
        self.assertEqual(response.status_code, 401)


class ReadOrderApiTest(ApiTestCase):
    """GET /api/orders and /api/orders/<id>"""

    def create_order(self):
        response = self.post_json("/api/orders", self.cart_payload(items=[{"product_id": self.product.id, "quantity": 1}]))
        return response.json()["data"]

    def test_list(self):
        first = self.create_order()
        second = self.create_order()

        response = self.client.get("/api/orders", **self.headers)

        self.assertEqual(response.status_code, 200)
        ids = [order["id"] for order in response.json()["data"]]
        self.assertEqual(ids, [second["id"], first["id"]])

    def test_list_with_limit(self):
        self.create_order()
        self.create_order()

        response = self.client.get("/api/orders?limit=1", **self.headers)

        self.assertEqual(len(response.json()["data"]), 1)
        self.assertEqual(response.json()["meta"], {"limit": 1, "offset": 0})

    def test_show(self):
        order = self.create_order()

        response = self.client.get(f"/api/orders/{order['id']}", **self.headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["tracking_number"], order["tracking_number"])

    def test_show_other_customers_order_is_403(self):
        order = self.create_order()
        other = make_customer(name="Other")

        response = self.client.get(f"/api/orders/{order['id']}", HTTP_X_USER_ID=str(other.id))

        self.assertEqual(response.status_code, 403)

    def test_show_missing_is_404(self):
        response = self.client.get("/api/orders/424242", **self.headers)
        self.assertEqual(response.status_code, 404)


class CouponValidateApiTest(ApiTestCase):
    """POST /api/coupons/validate"""

    def test_valid(self):
        make_coupon(code="SAVE10", discount_type="percentage", value="10")
        response = self.post_json("/api/coupons/validate", {"code": "SAVE10", "subtotal": 150})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"valid": True, "discount": "15.00", "message": "Coupon applied successfully"},
        )

    def test_not_found(self):
        response = self.post_json("/api/coupons/validate", {"code": "NOPE", "subtotal": 10})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["valid"], False)
        self.assertEqual(response.json()["message"], "Coupon not found")

    def test_negative_subtotal(self):
        response = self.post_json("/api/coupons/validate", {"code": "SAVE10", "subtotal": -1})
        self.assertEqual(response.status_code, 422)
        self.assertIn("subtotal", response.json()["errors"])

    def test_oversized_subtotal(self):
        response = self.post_json("/api/coupons/validate", {"code": "SAVE10", "subtotal": "1e30"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            response.json()["errors"]["subtotal"],
            ["The subtotal field must not be greater than 9999999999.99."],
        )


class GraphQLApiTest(ApiTestCase):
    """Tests for the /graphql/ endpoint."""

    def graphql(self, query, variables=None):
        payload = {"query": query}
        if variables:
            payload["variables"] = variables
        return self.post_json("/graphql/", payload)

    def test_create_order_mutation(self):
        make_coupon(code="SAVE10", discount_type="percentage", value="10")
        mutation = """
            mutation CreateOrder($input: CreateOrderInput!) {
                createOrder(input: $input) {
                    id
                    trackingNumber
                    status
                    totalAmount
                    items { productId quantity unitPrice }
                    detail { recipientName deliveryDate }
                }
            }
        """
        variables = {
            "input": {
                "items": [{"productId": self.product.id, "quantity": 2}],
                "couponCode": "SAVE10",
                "recipientName": "Maria Garcia",
                "recipientPhone": "+1234567890",
                "deliveryDate": (timezone.localdate() + timedelta(days=1)).isoformat(),
            }
        }

        response = self.graphql(mutation, variables)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertNotIn("errors", data)
        order = data["data"]["createOrder"]
        self.assertEqual(order["status"], "pending")
        self.assertEqual(order["totalAmount"], "18.00")
        self.assertEqual(order["items"][0]["quantity"], 2)
        self.assertEqual(order["detail"]["recipientName"], "Maria Garcia")

    def test_create_order_failure_is_reported(self):
        mutation = """
            mutation {
                createOrder(input: {
                    items: [{productId: %d, quantity: 10}]
                    recipientName: "Maria"
                    recipientPhone: "+1234567890"
                    deliveryDate: "%s"
                }) { id }
            }
        """ % (self.product.id, (timezone.localdate() + timedelta(days=1)).isoformat())

        response = self.graphql(mutation)

        data = response.json()
        self.assertIn("errors", data)
        self.assertEqual(data["errors"][0]["message"], "Insufficient stock for product: Red Roses")
        self.assertEqual(data["errors"][0]["extensions"]["code"], "CHECKOUT_FAILED")
        self.assertFalse(OrderORM.objects.exists())

    def test_order_query(self):
        created = self.post_json("/api/orders", self.cart_payload()).json()["data"]
        query = """
            query {
                order(id: %d) { trackingNumber totalAmount shippingCost }
            }
        """ % created["id"]

        response = self.graphql(query)

        order = response.json()["data"]["order"]
        self.assertEqual(order["trackingNumber"], created["tracking_number"])
        self.assertEqual(order["totalAmount"], "20.00")
        self.assertEqual(order["shippingCost"], "0.00")

    def test_validate_coupon_mutation(self):
        make_coupon(code="FIVE", discount_type="fixed", value="5", min_purchase="50")
        mutation = """
            mutation {
                validateCoupon(code: "FIVE", subtotal: "20.00") { valid discount message }
            }
        """

        response = self.graphql(mutation)

        result = response.json()["data"]["validateCoupon"]
        self.assertFalse(result["valid"])
        self.assertEqual(result["discount"], "0.00")
        self.assertEqual(result["message"], "Minimum purchase of 50.00 required")

    def test_orders_query_rejects_negative_pagination(self):
        for arguments in ("limit: -1", "offset: -1"):
            response = self.graphql("query { orders(%s) { id } }" % arguments)

            data = response.json()
            self.assertIsNone(data["data"])
            self.assertEqual(data["errors"][0]["extensions"]["code"], "VALIDATION_ERROR")

    def test_orders_query_paginates(self):
        self.post_json("/api/orders", self.cart_payload(items=[{"product_id": self.product.id, "quantity": 1}]))
        self.post_json("/api/orders", self.cart_payload(items=[{"product_id": self.product.id, "quantity": 1}]))

        response = self.graphql("query { orders(limit: 1, offset: 1) { id } }")

        self.assertNotIn("errors", response.json())
        self.assertEqual(len(response.json()["data"]["orders"]), 1)
