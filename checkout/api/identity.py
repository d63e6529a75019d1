"""
Resolves the calling customer from the request.

Authentication happens upstream; the gateway forwards the authenticated
customer id in the ``X-User-ID`` header.
"""
from uuid import UUID

from checkout.api.middleware import ValidationError
from checkout.infra.models import CustomerORM
from checkout.infra.repositories import CustomerRepository

USER_HEADER = "X-User-ID"


def current_customer(request, customer_repo: CustomerRepository | None = None) -> CustomerORM:
    user_id = request.headers.get(USER_HEADER)
    if not user_id:
        raise ValidationError("Unauthenticated.", code="UNAUTHENTICATED")
    try:
        customer_uuid = UUID(user_id)
    except (ValueError, TypeError):
        raise ValidationError("Unauthenticated.", code="UNAUTHENTICATED")

    customer = (customer_repo or CustomerRepository()).get_by_id(customer_uuid)
    if customer is None:
        raise ValidationError("Unauthenticated.", code="UNAUTHENTICATED")
    return customer
