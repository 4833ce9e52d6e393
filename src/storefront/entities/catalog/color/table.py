"""Color database table model."""

from sqlmodel import Field

from src.storefront.entities.core import EntityTable


class ColorTable(EntityTable, table=True):
    __tablename__ = "colors"

    name: str = Field(index=True)
    code: str = Field(index=True, max_length=7)
    display_name: str | None = None
