"""
URL configuration for storefront project.
"""
from django.contrib import admin
from django.urls import path

from checkout.api.views import (
    coupon_validate_view,
    graphql_view,
    order_detail_view,
    orders_view,
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/orders', orders_view, name='orders'),
    path('api/orders/<int:order_id>', order_detail_view, name='order-detail'),
    path('api/coupons/validate', coupon_validate_view, name='coupon-validate'),
    path('graphql/', graphql_view, name='graphql'),
]
