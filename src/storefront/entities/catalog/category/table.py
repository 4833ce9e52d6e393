"""Category database table model."""

from sqlmodel import Field

from src.storefront.entities.core import EntityTable


class CategoryTable(EntityTable, table=True):
    """Catalog category. ``parent_id`` 0 marks a root category."""

    __tablename__ = "categories"

    parent_id: int = Field(default=0, index=True)
    level: int = 0
    name: str
    order_level: int = 0
    banner: int | None = None
    icon: int | None = None
    featured: int = 0
    slug: str = Field(unique=True, index=True)
    meta_title: str | None = None
    meta_description: str | None = None
