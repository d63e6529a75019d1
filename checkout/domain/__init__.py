from checkout.domain.coupon import Coupon, CouponEvaluation, DiscountType, evaluate_coupon
from checkout.domain.order import CartLine, CartRequest, OrderStatus, OrderTotals, PaymentMethod

__all__ = [
    "CartLine",
    "CartRequest",
    "Coupon",
    "CouponEvaluation",
    "DiscountType",
    "OrderStatus",
    "OrderTotals",
    "PaymentMethod",
    "evaluate_coupon",
]
