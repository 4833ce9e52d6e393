"""Entity package: Upload."""

from .repository import UploadRepository
from .table import UploadTable

__all__ = ["UploadRepository", "UploadTable"]
