"""
REST and GraphQL views with structured logging.
"""
import json
import logging
from uuid import uuid4

from ariadne import graphql_sync
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from checkout.api.identity import USER_HEADER, current_customer
from checkout.api.middleware import ErrorHandler, ValidationError
from checkout.api.schema import schema
from checkout.api.serializers import serialize_coupon_evaluation, serialize_order
from checkout.api.validation import parse_cart, parse_coupon_check
from checkout.infra.pii_masker import mask_pii_in_dict
from checkout.services import CheckoutService, CouponService, OrderService

logger = logging.getLogger(__name__)


def _json_body(request):
    try:
        return json.loads(request.body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON", code="INVALID_JSON")


def _positive_int_param(request, name: str, default: int | None) -> int | None:
    raw = request.GET.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"The {name} parameter must be an integer.")
    if value < 0:
        raise ValidationError(f"The {name} parameter must be at least 0.")
    return value


class ApiView:
    """Runs a handler, maps errors to JSON responses and logs the outcome."""

    operation = "api"

    def dispatch(self, request, *args, **kwargs):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        log_data = {
            "request_id": request_id,
            "user_id": request.headers.get(USER_HEADER),
            "operation": self.operation,
        }
        logger.info("api_request", extra=mask_pii_in_dict(log_data))

        try:
            handler = getattr(self, request.method.lower())
            response = handler(request, *args, **kwargs)
        except Exception as e:
            response = ErrorHandler.handle_error(e)
            logger.warning(
                "api_error",
                extra=mask_pii_in_dict({**log_data, "error": f"{type(e).__name__}: {e}"}),
            )

        logger.info(
            "api_response",
            extra=mask_pii_in_dict({**log_data, "status": response.status_code}),
        )
        return response


class OrdersView(ApiView):
    operation = "orders"

    def get(self, request):
        customer = current_customer(request)
        limit = _positive_int_param(request, "limit", None)
        offset = _positive_int_param(request, "offset", 0)
        orders = OrderService().get_orders_by_customer(customer.id, limit=limit, offset=offset)
        return JsonResponse({
            "data": [serialize_order(order) for order in orders],
            "meta": {"limit": limit, "offset": offset},
        })

    def post(self, request):
        customer = current_customer(request)
        cart = parse_cart(_json_body(request), customer.id)
        order = CheckoutService().create_order(cart)
        return JsonResponse({"data": serialize_order(order)}, status=201)


class OrderDetailView(ApiView):
    operation = "order_detail"

    def get(self, request, order_id: int):
        customer = current_customer(request)
        order = OrderService().get_order(order_id)
        if order is None:
            raise ValidationError("Order not found", code="NOT_FOUND")
        if order.customer_id != customer.id:
            raise ValidationError("Unauthorized", code="FORBIDDEN")
        return JsonResponse({"data": serialize_order(order)})


class CouponValidateView(ApiView):
    operation = "coupon_validate"

    def post(self, request):
        current_customer(request)
        code, subtotal = parse_coupon_check(_json_body(request))
        evaluation = CouponService().evaluate(code, subtotal)
        return JsonResponse(serialize_coupon_evaluation(evaluation))


class GraphQLView(ApiView):
    operation = "graphql"

    def get(self, request):
        return JsonResponse({"message": "GraphQL endpoint. Use POST for queries."})

    def post(self, request):
        data = _json_body(request)
        success, result = graphql_sync(
            schema,
            data,
            context_value={"request": request},
        )
        status_code = 200 if success else 400
        return JsonResponse(result, status=status_code)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def orders_view(request):
    """List or create the caller's orders."""
    return OrdersView().dispatch(request)


@csrf_exempt
@require_http_methods(["GET"])
def order_detail_view(request, order_id):
    """Single order of the caller."""
    return OrderDetailView().dispatch(request, order_id)


@csrf_exempt
@require_http_methods(["POST"])
def coupon_validate_view(request):
    """Pre-checkout coupon validation."""
    return CouponValidateView().dispatch(request)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def graphql_view(request):
    """GraphQL endpoint."""
    return GraphQLView().dispatch(request)
