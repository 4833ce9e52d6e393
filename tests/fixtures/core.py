from __future__ import annotations

import json
from collections.abc import Callable, Generator
from dataclasses import replace
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.storefront.api.http.app import create_app
from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.services import DbSessionService, StorefrontUrls, UpstreamClient
from src.storefront.runtime.config.config_data import (
    AppConfig,
    AuthConfig,
    ConfigData,
    LoggingConfig,
    StorefrontConfig,
)

API_TOKEN = "test-token"
AUTH_HEADERS = {"Authorization": f"Bearer {API_TOKEN}"}
UPSTREAM_URL = "https://upstream.test/"
STOREFRONT_URL = "https://homolog.test/"


class UpstreamStub:
    """Canned upstream API behind an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {"success": True}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.calls[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content) if self.last.content else None


@pytest.fixture
def engine() -> Generator[Engine]:
    """In-memory database shared by the test and the application."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.storefront.entities import catalog  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session]:
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def app_config() -> ConfigData:
    return ConfigData(
        app=AppConfig(environment="test"),
        logging=LoggingConfig(file=""),
        auth=AuthConfig(api_token=API_TOKEN),
        storefront=StorefrontConfig(
            homologation_url=STOREFRONT_URL,
            production_url="https://shop.test/",
            api_url=UPSTREAM_URL,
        ),
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def dependencies(
    app_config: ConfigData, engine: Engine, upstream: UpstreamStub
) -> ApplicationDependencies:
    return ApplicationDependencies(
        config=app_config,
        database_service=DbSessionService(engine),
        urls=StorefrontUrls.from_config(app_config),
        upstream=UpstreamClient(
            app_config.storefront, transport=httpx.MockTransport(upstream.handler)
        ),
    )


@pytest.fixture
def client(dependencies: ApplicationDependencies) -> Generator[TestClient]:
    """Authenticated client running the application lifespan."""
    with TestClient(create_app(dependencies), headers=AUTH_HEADERS) as client:
        yield client


@pytest.fixture
def anonymous_client(dependencies: ApplicationDependencies) -> TestClient:
    return TestClient(create_app(dependencies))


@pytest.fixture
def make_client(
    dependencies: ApplicationDependencies,
) -> Callable[..., TestClient]:
    """Build an authenticated client with some configuration sections replaced.

    Example:
        client = make_client(listing=ListingConfig(legacy_id_sort=True))
    """

    def _make(**sections: Any) -> TestClient:
        config = dependencies.config.model_copy(update=sections)
        app = create_app(replace(dependencies, config=config))
        return TestClient(app, headers=AUTH_HEADERS)

    return _make
