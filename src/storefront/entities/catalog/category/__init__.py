"""Entity package: Category."""

from .entity import CategoryCreate, CategoryCreateBody, CategoryPatch, CategoryPatchBody
from .repository import CategoryRepository
from .table import CategoryTable

__all__ = [
    "CategoryCreate",
    "CategoryCreateBody",
    "CategoryPatch",
    "CategoryPatchBody",
    "CategoryRepository",
    "CategoryTable",
]
