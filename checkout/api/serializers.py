"""
JSON representation of the Order aggregate.
"""
from __future__ import annotations

from decimal import Decimal

from checkout.domain.coupon import CouponEvaluation
from checkout.infra.models import OrderDetailORM, OrderItemORM, OrderORM


def money(value) -> str | None:
    if value is None:
        return None
    return str(Decimal(value).quantize(Decimal("0.01")))


def serialize_item(item: OrderItemORM) -> dict:
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": item.product.name,
        "quantity": item.quantity,
        "unit_price": money(item.unit_price),
    }


def serialize_detail(detail: OrderDetailORM | None) -> dict | None:
    if detail is None:
        return None
    slot = detail.delivery_slot
    return {
        "recipient_name": detail.recipient_name,
        "recipient_phone": detail.recipient_phone,
        "delivery_date": detail.delivery_date.isoformat(),
        "delivery_slot": {
            "id": slot.id,
            "start_time": slot.start_time.strftime("%H:%M"),
            "end_time": slot.end_time.strftime("%H:%M"),
            "additional_cost": money(slot.additional_cost),
        } if slot else None,
        "card_message": detail.card_message,
    }


def serialize_order(order: OrderORM) -> dict:
    try:
        detail = order.detail
    except OrderDetailORM.DoesNotExist:
        detail = None
    return {
        "id": order.id,
        "tracking_number": order.tracking_number,
        "status": order.status,
        "total_amount": money(order.total_amount),
        "shipping_cost": money(order.shipping_cost),
        "payment_method": order.payment_method,
        "items": [serialize_item(item) for item in order.items.all()],
        "detail": serialize_detail(detail),
        "created_at": order.created_at.isoformat(),
        "updated_at": order.updated_at.isoformat(),
    }


def serialize_coupon_evaluation(evaluation: CouponEvaluation) -> dict:
    return {
        "valid": evaluation.valid,
        "discount": money(evaluation.discount),
        "message": evaluation.message,
    }
