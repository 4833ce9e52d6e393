"""Entity package: Product and its variants."""

from .table import BrandTable, ProductStockTable, ProductTable  # isort: skip
from .entity import (
    COLOR_TYPE,
    ProductCreate,
    ProductCreateBody,
    ProductPatch,
    ProductPatchBody,
    VariantCreate,
    VariantCreateBody,
    VariantFields,
    VariantPatch,
    VariantPatchBody,
    product_slug,
)
from .repository import ProductRepository, VariantRepository

__all__ = [
    "BrandTable",
    "COLOR_TYPE",
    "ProductCreate",
    "ProductCreateBody",
    "ProductPatch",
    "ProductPatchBody",
    "ProductRepository",
    "ProductStockTable",
    "ProductTable",
    "VariantCreate",
    "VariantCreateBody",
    "VariantFields",
    "VariantPatch",
    "VariantPatchBody",
    "VariantRepository",
    "product_slug",
]
