from dataclasses import dataclass

from src.storefront.core.services import DbSessionService, StorefrontUrls, UpstreamClient
from src.storefront.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    urls: StorefrontUrls
    upstream: UpstreamClient
