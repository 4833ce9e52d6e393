"""Product attribute tables."""

from sqlmodel import Field

from src.storefront.entities.core import EntityTable


class AttributeTable(EntityTable, table=True):
    __tablename__ = "attributes"

    name: str = Field(index=True)


class AttributeValueTable(EntityTable, table=True):
    __tablename__ = "attribute_values"

    attribute_id: int = Field(index=True)
    value: str
