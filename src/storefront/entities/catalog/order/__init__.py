"""Entity package: orders."""

from .table import CombinedOrderTable, OrderDetailTable, OrderTable  # isort: skip
from .entity import OrderCreate, OrderCreateBody, OrderDetailCreate, OrderPatch, OrderPatchBody
from .repository import SHIPPING_ONLY_KEYS, OrderRepository

__all__ = [
    "CombinedOrderTable",
    "OrderCreate",
    "OrderCreateBody",
    "OrderDetailCreate",
    "OrderDetailTable",
    "OrderPatch",
    "OrderPatchBody",
    "OrderRepository",
    "OrderTable",
    "SHIPPING_ONLY_KEYS",
]
