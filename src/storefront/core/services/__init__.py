"""Core services exports."""

from .database.db_session import DbSessionService
from .upstream_client import UpstreamClient, UpstreamResponse, UpstreamUnavailableError
from .url_service import StorefrontUrls

__all__ = [
    "DbSessionService",
    "StorefrontUrls",
    "UpstreamClient",
    "UpstreamResponse",
    "UpstreamUnavailableError",
]
