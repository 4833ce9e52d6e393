"""Entity package: Color."""

from .entity import ColorCreate, ColorCreateBody, ColorPatch, ColorPatchBody, compact_name
from .repository import ColorRepository
from .table import ColorTable

__all__ = [
    "ColorCreate",
    "ColorCreateBody",
    "ColorPatch",
    "ColorPatchBody",
    "ColorRepository",
    "ColorTable",
    "compact_name",
]
