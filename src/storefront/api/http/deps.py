"""FastAPI dependency implementations."""

from collections.abc import Iterator

from fastapi import Depends, Header, Request
from sqlmodel import Session

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.api.http.responses import unauthorized
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.core.security import token_matches
from src.storefront.core.services import StorefrontUrls, UpstreamClient
from src.storefront.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_app_config(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> ConfigData:
    """Configuration the application was built with."""
    return app_deps.config


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session that is closed after the request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_urls(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> StorefrontUrls:
    return app_deps.urls


def get_upstream(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> UpstreamClient:
    return app_deps.upstream


def get_list_engine(
    session: Session = Depends(get_db_session),
    config: ConfigData = Depends(get_app_config),
) -> ListQueryEngine:
    return ListQueryEngine(session, config.listing)


def get_list_params(
    sort: str | None = None,
    order: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    page: str | None = None,
) -> ListParams:
    """Collection query parameters; malformed numbers count as absent."""
    return ListParams.from_query(sort=sort, order=order, limit=limit, offset=offset, page=page)


async def require_api_token(
    authorization: str | None = Header(default=None),
    config: ConfigData = Depends(get_app_config),
) -> None:
    """Reject requests without ``Authorization: Bearer <api token>``."""
    if not token_matches(authorization, config.auth.api_token):
        raise unauthorized()
