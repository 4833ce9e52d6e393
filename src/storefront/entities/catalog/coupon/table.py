"""Discount coupon tables."""

from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.storefront.entities.core import EntityTable


class CouponTable(EntityTable, table=True):
    """Discount coupon. Dates are stored as epoch seconds (UTC midnight)."""

    __tablename__ = "coupons"

    user_id: int | None = None
    type: str = Field(max_length=32)
    code: str = Field(index=True)
    details: Any = Field(default=None, sa_column=sa.Column(sa.JSON, nullable=True))
    discount: float = 0
    discount_type: str = Field(max_length=16)
    start_date: int
    end_date: int


class CouponUsageTable(EntityTable, table=True):
    __tablename__ = "coupon_usages"

    user_id: int = Field(index=True)
    coupon_id: int = Field(index=True)
