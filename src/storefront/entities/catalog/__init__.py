"""Catalog entities.

Importing this package registers every table on ``SQLModel.metadata``.
"""

from . import attribute, category, color, coupon, customer, order, product, upload

__all__ = [
    "attribute",
    "category",
    "color",
    "coupon",
    "customer",
    "order",
    "product",
    "upload",
]
