"""
Row-level locks on product stock for the duration of a checkout transaction.
"""
from contextlib import contextmanager
from typing import Iterable

from django.db import transaction

from checkout.infra.models import ProductORM


@contextmanager
def product_stock_lock(product_ids: Iterable[int]):
    """
    Lock product rows with SELECT ... FOR UPDATE.

    Must run inside ``transaction.atomic``. Rows are locked in primary key
    order so that two checkouts touching the same products cannot deadlock.
    Locks are released when the surrounding transaction ends.

    Usage:
        with transaction.atomic(), product_stock_lock(ids) as products:
            product = products.get(product_id)
    """
    ids = sorted(set(product_ids))
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("product_stock_lock requires an atomic block")

    products = {
        product.id: product
        for product in (
            ProductORM.objects
            .alive()
            .select_for_update()
            .filter(id__in=ids)
            .order_by("id")
        )
    }
    yield products
