"""Product, brand and product stock (variant) tables."""

from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.storefront.entities.core import EntityTable


def _json_column() -> Any:
    return Field(default=None, sa_column=sa.Column(sa.JSON, nullable=True))


class BrandTable(EntityTable, table=True):
    __tablename__ = "brands"

    name: str
    slug: str | None = None


class ProductTable(EntityTable, table=True):
    """Catalog product.

    ``photos`` is a comma separated list of upload ids; promotion dates are
    epoch seconds.
    """

    __tablename__ = "products"

    name: str
    added_by: str = "admin"
    user_id: int | None = None
    category_id: int = Field(default=0, index=True)
    brand_id: int | None = None
    photos: str | None = None
    thumbnail_img: int | None = None
    video_provider: str | None = None
    video_link: str | None = None
    tags: str | None = None
    description: str | None = None
    unit_price: float = 0
    variant_product: int = 0
    attributes: Any = _json_column()
    choice_options: Any = _json_column()
    colors: Any = _json_column()
    todays_deal: int = 0
    published: int = 1
    featured: int = 0
    current_stock: int = 0
    unit: str | None = None
    weight: float | None = None
    min_qty: int = 1
    low_stock_quantity: int | None = None
    discount: float = 0
    discount_type: str | None = None
    discount_start_date: int | None = None
    discount_end_date: int | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_img: int | None = None
    slug: str = Field(index=True)
    rating: float = 0
    barcode: str | None = None
    refundable: int = 0
    num_of_sale: int = 0


class ProductStockTable(EntityTable, table=True):
    """A product variant. ``variant`` reads ``<color>-<attribute value>``."""

    __tablename__ = "product_stocks"

    product_id: int = Field(index=True)
    variant: str = ""
    sku: str | None = None
    price: float = 0
    qty: int = 0
    image: int | None = None
