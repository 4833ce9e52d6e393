"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(default=["http://localhost:3000"])
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(default="", description="Log file path (empty disables)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./storefront.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    create_tables: bool = Field(
        default=True, description="Create missing tables on application startup"
    )

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def connection_string(self) -> str:
        """Connection string handed to SQLAlchemy."""
        from sqlalchemy.engine import make_url

        url = make_url(self.url)
        if url.password and url.get_backend_name() == "postgresql":
            logger.warning(
                "Database URL contains an inline password; "
                "consider injecting it through DATABASE_URL instead."
            )
        return url.render_as_string(hide_password=False)


class AuthConfig(BaseModel):
    """Static bearer-token authentication."""

    api_token: str = Field(
        default="change-me", description="Token expected in 'Authorization: Bearer'"
    )


class StorefrontConfig(BaseModel):
    """Public storefront and upstream API locations."""

    homologation_url: str = Field(
        default="https://homologacao.enjoy.example/",
        description="Storefront base URL used outside production",
    )
    production_url: str = Field(
        default="https://www.enjoy.example/",
        description="Storefront base URL used in production",
    )
    api_url: str = Field(
        default="https://homologacao.enjoy.example/",
        description="Base URL of the upstream store REST API",
    )
    timeout_seconds: float = Field(
        default=15.0, description="Timeout applied to upstream requests"
    )
    seller_id: int = Field(
        default=9, description="Seller recorded on orders created through the API"
    )


class ListingConfig(BaseModel):
    """Collection endpoint behaviour."""

    page_size: int = Field(default=10, ge=1, description="Rows per page in paged mode")
    legacy_id_sort: bool = Field(
        default=False,
        description="Always order by id, ignoring the requested sort field",
    )


class CompatConfig(BaseModel):
    """Switches that keep historical response quirks."""

    legacy_not_found_status: bool = Field(
        default=True,
        description="Answer not-found with transport 200 and body status 404",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    debug: bool = Field(default=False, description="Debug mode")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Authentication configuration"
    )
    storefront: StorefrontConfig = Field(
        default_factory=StorefrontConfig, description="Storefront URLs"
    )
    listing: ListingConfig = Field(
        default_factory=ListingConfig, description="Listing behaviour"
    )
    compat: CompatConfig = Field(
        default_factory=CompatConfig, description="Compatibility switches"
    )
