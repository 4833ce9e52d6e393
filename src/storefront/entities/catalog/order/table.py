"""Order tables: combined orders, orders and order lines."""

from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.storefront.entities.core import EntityTable


def _json_column() -> Any:
    return Field(default=None, sa_column=sa.Column(sa.JSON, nullable=True))


class CombinedOrderTable(EntityTable, table=True):
    """Checkout grouping one or more seller orders."""

    __tablename__ = "combined_orders"

    user_id: int = Field(index=True)
    shipping_address: Any = _json_column()
    grand_total: float = 0


class OrderTable(EntityTable, table=True):
    """Order. ``shipping_address`` is a snapshot taken when the order is
    placed; ``date`` is epoch seconds."""

    __tablename__ = "orders"

    combined_order_id: int | None = Field(default=None, index=True)
    user_id: int = Field(index=True)
    seller_id: int | None = None
    shipping_address: Any = _json_column()
    shipping_type: str = "carrier"
    delivery_status: str = Field(default="pending", max_length=32)
    payment_type: str | None = None
    payment_status: str = Field(default="unpaid", max_length=32)
    payment_details: Any = _json_column()
    grand_total: float = 0
    coupon_discount: float = 0
    code: str | None = None
    tracking_code: str | None = None
    date: int | None = None
    ids_traking: str | None = None
    url_traking: str | None = None


class OrderDetailTable(EntityTable, table=True):
    """One product line of an order."""

    __tablename__ = "order_details"

    order_id: int = Field(index=True)
    seller_id: int | None = None
    product_id: int = Field(index=True)
    variation: str | None = None
    price: float = 0
    tax: float = 0
    shipping_cost: float = 0
    quantity: int = 1
    payment_status: str = Field(default="unpaid", max_length=32)
    delivery_status: str = Field(default="pending", max_length=32)
    shipping_type: str = "carrier"
