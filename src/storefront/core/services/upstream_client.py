"""HTTP client for the upstream store REST API."""

from typing import Any

import httpx
from loguru import logger

from src.storefront.runtime.config.config_data import StorefrontConfig


class UpstreamUnavailableError(Exception):
    """The upstream API could not be reached or answered with garbage."""


class UpstreamResponse:
    """Status code and decoded JSON body relayed back to the caller."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body


class UpstreamClient:
    """Thin async wrapper over ``httpx.AsyncClient`` bound to ``api_url``.

    ``transport`` may be supplied to route requests somewhere other than the
    network (tests pass an ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: StorefrontConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
    ) -> UpstreamResponse:
        """Forward one call and decode its JSON body.

        Raises:
            UpstreamUnavailableError: On transport failures or a non-JSON body.
        """
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "Upstream request failed",
                method=method,
                path=path,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise UpstreamUnavailableError(str(e)) from e

        try:
            body = response.json() if response.content else None
        except ValueError as e:
            logger.error(
                "Upstream returned a non-JSON body",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise UpstreamUnavailableError("invalid upstream response") from e

        logger.debug(
            "Upstream {} {} -> {}", method, path, response.status_code
        )
        return UpstreamResponse(response.status_code, body)

    async def get(self, path: str, params: dict | None = None) -> UpstreamResponse:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> UpstreamResponse:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> UpstreamResponse:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> UpstreamResponse:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()
