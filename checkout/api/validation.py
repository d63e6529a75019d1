"""
Request body validation for checkout and coupon endpoints.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from uuid import UUID

from django.utils import timezone

from checkout.api.middleware import ValidationError
from checkout.domain.order import CartLine, CartRequest, PaymentMethod

MAX_RECIPIENT_NAME = 255
MAX_RECIPIENT_PHONE = 20
MAX_CARD_MESSAGE = 500
MAX_SUBTOTAL = Decimal("9999999999.99")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _optional_string(data: dict, key: str, errors: dict, max_length: int | None = None) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        errors[key] = [f"The {key} field must be a string."]
        return None
    if max_length is not None and len(value) > max_length:
        errors[key] = [f"The {key} field must not be greater than {max_length} characters."]
        return None
    return value


def _required_string(data: dict, key: str, errors: dict, max_length: int) -> str | None:
    if not data.get(key):
        errors[key] = [f"The {key} field is required."]
        return None
    return _optional_string(data, key, errors, max_length)


def _parse_lines(raw_items, errors: dict) -> list[CartLine]:
    if not isinstance(raw_items, list) or not raw_items:
        errors["items"] = ["The items field must be a non-empty list."]
        return []

    lines = []
    for index, item in enumerate(raw_items):
        if not isinstance(item, dict):
            errors[f"items.{index}"] = ["Each item must be an object."]
            continue
        product_id = item.get("product_id")
        quantity = item.get("quantity")
        if not _is_int(product_id):
            errors[f"items.{index}.product_id"] = ["The product_id field must be an integer."]
        if not _is_int(quantity) or quantity < 1:
            errors[f"items.{index}.quantity"] = ["The quantity field must be an integer of at least 1."]
        if f"items.{index}.product_id" in errors or f"items.{index}.quantity" in errors:
            continue
        lines.append(CartLine(product_id=product_id, quantity=quantity))
    return lines


def _parse_delivery_date(value, errors: dict) -> date | None:
    if not isinstance(value, str) or not value:
        errors["delivery_date"] = ["The delivery_date field is required."]
        return None
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        errors["delivery_date"] = ["The delivery_date field must be a valid date."]
        return None
    if parsed <= timezone.localdate():
        errors["delivery_date"] = ["The delivery_date field must be a date after today."]
        return None
    return parsed


def parse_cart(data, customer_id: UUID) -> CartRequest:
    """Build a CartRequest from a decoded JSON body or raise ValidationError."""
    if not isinstance(data, dict):
        raise ValidationError("The request body must be a JSON object.")

    errors: dict[str, list[str]] = {}
    lines = _parse_lines(data.get("items"), errors)
    recipient_name = _required_string(data, "recipient_name", errors, MAX_RECIPIENT_NAME)
    recipient_phone = _required_string(data, "recipient_phone", errors, MAX_RECIPIENT_PHONE)
    delivery_date = _parse_delivery_date(data.get("delivery_date"), errors)
    coupon_code = _optional_string(data, "coupon_code", errors)
    card_message = _optional_string(data, "card_message", errors, MAX_CARD_MESSAGE)

    delivery_slot_id = data.get("delivery_slot_id")
    if delivery_slot_id is not None and not _is_int(delivery_slot_id):
        errors["delivery_slot_id"] = ["The delivery_slot_id field must be an integer."]

    payment_method = None
    raw_payment = data.get("payment_method")
    if raw_payment is not None:
        try:
            payment_method = PaymentMethod(raw_payment)
        except ValueError:
            choices = ", ".join(method.value for method in PaymentMethod)
            errors["payment_method"] = [f"The payment_method field must be one of: {choices}."]

    if errors:
        raise ValidationError("The given data was invalid.", errors=errors)

    return CartRequest(
        customer_id=customer_id,
        lines=tuple(lines),
        coupon_code=coupon_code or None,
        recipient_name=recipient_name,
        recipient_phone=recipient_phone,
        delivery_date=delivery_date,
        delivery_slot_id=delivery_slot_id,
        card_message=card_message,
        payment_method=payment_method,
    )


def parse_coupon_check(data) -> tuple[str, Decimal]:
    """Return (code, subtotal) from a coupon validation body."""
    if not isinstance(data, dict):
        raise ValidationError("The request body must be a JSON object.")

    errors: dict[str, list[str]] = {}
    code = data.get("code")
    if not isinstance(code, str) or not code:
        errors["code"] = ["The code field is required."]

    subtotal = None
    raw_subtotal = data.get("subtotal")
    if isinstance(raw_subtotal, bool) or not isinstance(raw_subtotal, (int, float, str, Decimal)):
        errors["subtotal"] = ["The subtotal field must be a number."]
    else:
        try:
            subtotal = Decimal(str(raw_subtotal))
        except InvalidOperation:
            errors["subtotal"] = ["The subtotal field must be a number."]
        else:
            if not subtotal.is_finite() or subtotal < 0:
                errors["subtotal"] = ["The subtotal field must be at least 0."]
            elif subtotal > MAX_SUBTOTAL:
                errors["subtotal"] = [f"The subtotal field must not be greater than {MAX_SUBTOTAL}."]

    if errors:
        raise ValidationError("The given data was invalid.", errors=errors)
    return code, subtotal
