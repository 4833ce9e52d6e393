"""Entity package: Attribute."""

from .entity import (
    AttributeCreate,
    AttributeCreateBody,
    AttributePatch,
    AttributePatchBody,
    AttributeValueCreate,
    AttributeValueCreateBody,
    AttributeValuePatch,
    AttributeValuePatchBody,
)
from .repository import AttributeRepository
from .table import AttributeTable, AttributeValueTable

__all__ = [
    "AttributeCreate",
    "AttributeCreateBody",
    "AttributePatch",
    "AttributePatchBody",
    "AttributeRepository",
    "AttributeTable",
    "AttributeValueCreate",
    "AttributeValueCreateBody",
    "AttributeValuePatch",
    "AttributeValuePatchBody",
    "AttributeValueTable",
]
