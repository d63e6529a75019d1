"""
GraphQL schema definition using Ariadne.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from ariadne import (
    MutationType,
    QueryType,
    ScalarType,
    load_schema_from_path,
    make_executable_schema,
)
from graphql import GraphQLError

from checkout.api.identity import current_customer
from checkout.api.middleware import ValidationError
from checkout.api.serializers import serialize_coupon_evaluation, serialize_order
from checkout.api.validation import parse_cart, parse_coupon_check
from checkout.domain.errors import CheckoutError
from checkout.services import CheckoutService, CouponService, OrderService

# Load schema from .graphql files
SCHEMAS_DIR = Path(__file__).parent / "schemas"
type_defs = "\n".join([
    load_schema_from_path(SCHEMAS_DIR / "common"),
    load_schema_from_path(SCHEMAS_DIR / "query"),
    load_schema_from_path(SCHEMAS_DIR / "mutation"),
])

query = QueryType()
mutation = MutationType()


def _customer(info):
    try:
        return current_customer(info.context["request"])
    except ValidationError as e:
        raise GraphQLError(e.message, extensions={"code": e.code})


@query.field("order")
def resolve_order(_, info, id):
    """Resolve order query."""
    customer = _customer(info)
    order = OrderService().get_order(id)
    if order is None:
        return None
    if order.customer_id != customer.id:
        raise GraphQLError("Unauthorized", extensions={"code": "FORBIDDEN"})
    return serialize_order(order)


@query.field("orders")
def resolve_orders(_, info, limit=None, offset=0):
    """Resolve the caller's orders, newest first."""
    customer = _customer(info)
    offset = offset or 0
    for name, value in (("limit", limit), ("offset", offset)):
        if value is not None and value < 0:
            raise GraphQLError(
                f"The {name} parameter must be at least 0.",
                extensions={"code": "VALIDATION_ERROR"},
            )
    orders = OrderService().get_orders_by_customer(customer.id, limit=limit, offset=offset)
    return [serialize_order(order) for order in orders]


@mutation.field("createOrder")
def resolve_create_order(_, info, input: dict):
    """Resolve create order mutation."""
    customer = _customer(info)
    try:
        cart = parse_cart(input, customer.id)
        order = CheckoutService().create_order(cart)
    except ValidationError as e:
        raise GraphQLError(e.message, extensions={"code": e.code, "errors": e.errors})
    except CheckoutError as e:
        raise GraphQLError(e.reason, extensions={"code": "CHECKOUT_FAILED", "error": type(e).__name__})
    return serialize_order(order)


@mutation.field("validateCoupon")
def resolve_validate_coupon(_, info, code, subtotal):
    """Resolve coupon validation mutation."""
    _customer(info)
    try:
        code, subtotal = parse_coupon_check({"code": code, "subtotal": subtotal})
    except ValidationError as e:
        raise GraphQLError(e.message, extensions={"code": e.code, "errors": e.errors})
    return serialize_coupon_evaluation(CouponService().evaluate(code, subtotal))


decimal_scalar = ScalarType("Decimal")
date_scalar = ScalarType("Date")
datetime_scalar = ScalarType("DateTime")


@decimal_scalar.serializer
def serialize_decimal(value):
    """Serialize Decimal to string."""
    return str(value)


@decimal_scalar.value_parser
def parse_decimal_value(value):
    """Parse Decimal from string or number."""
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid decimal: {value}")


@date_scalar.serializer
def serialize_date(value):
    """Serialize Date to ISO format string."""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@datetime_scalar.serializer
def serialize_datetime(value):
    """Serialize DateTime to ISO format string."""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


# Create executable schema
schema = make_executable_schema(
    type_defs,
    query,
    mutation,
    decimal_scalar,
    date_scalar,
    datetime_scalar,
    convert_names_case=True,
)
