"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.api.http.deps import require_api_token
from src.storefront.api.http.responses import (
    EnvelopeException,
    envelope_exception_handler,
    http_exception_handler,
    request_validation_handler,
)
from src.storefront.api.http.routers import health
from src.storefront.api.http.routers.catalog import (
    attributes,
    categories,
    colors,
    coupons,
    customers,
    orders,
    products,
    variants,
)
from src.storefront.api.http.routers.enjoy import clients as enjoy_clients
from src.storefront.api.http.routers.enjoy import orders as enjoy_orders
from src.storefront.api.http.routers.enjoy import products as enjoy_products
from src.storefront.api.utils.app_startup import configure_logging
from src.storefront.core.services import DbSessionService, StorefrontUrls, UpstreamClient
from src.storefront.runtime.context import get_config

__all__ = ["app", "build_dependencies", "create_app"]


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if request.app.state.config.app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def build_dependencies() -> ApplicationDependencies:
    """Resolve configuration, database, storefront URLs and upstream client once."""
    config = get_config()
    return ApplicationDependencies(
        config=config,
        database_service=DbSessionService(),
        urls=StorefrontUrls.from_config(config),
        upstream=UpstreamClient(config.storefront),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies()
    deps: ApplicationDependencies = app.state.app_dependencies

    logger.info("Starting up application in {} environment", deps.config.app.environment)
    if deps.config.database.create_tables:
        deps.database_service.create_all()
    try:
        yield
    finally:
        logger.info("Shutting down application")
        await deps.upstream.aclose()


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "status": 500,
                    "message": "Internal server error",
                    "error": str(exc),
                },
                headers={"X-Request-ID": request_id},
            )


def api_router() -> APIRouter:
    """Every authenticated resource under ``/api``."""
    api = APIRouter(prefix="/api", dependencies=[Depends(require_api_token)])
    # variants before products so "/products/variants" is not read as a product id
    for module in (categories, colors, coupons, attributes, variants, products, customers, orders):
        api.include_router(module.router)

    enjoy = APIRouter(prefix="/enjoy")
    for module in (enjoy_products, enjoy_clients, enjoy_orders):
        enjoy.include_router(module.router)
    api.include_router(enjoy)
    return api


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the application.

    ``dependencies`` is built from the active configuration at startup when
    not supplied.
    """
    config = dependencies.config if dependencies is not None else get_config()
    configure_logging()

    production = config.app.environment == "production"
    app = FastAPI(
        title="Storefront API",
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    app.state.config = config
    app.state.app_dependencies = dependencies

    app.add_middleware(SecurityHeadersMiddleware)

    # --- CORS configuration ---
    if production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(EnvelopeException, envelope_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # --- Router registration ---
    app.include_router(health.router)
    app.include_router(api_router())
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
