"""Relay of upstream responses to the API client."""

from collections.abc import Awaitable

from starlette.responses import JSONResponse, Response

from src.storefront.api.http.responses import upstream_unavailable
from src.storefront.core.services import UpstreamResponse, UpstreamUnavailableError


async def relay(call: Awaitable[UpstreamResponse]) -> Response:
    """Answer with the upstream status code and JSON body unchanged.

    Raises:
        EnvelopeException: 502 when the upstream API cannot be reached.
    """
    try:
        result = await call
    except UpstreamUnavailableError as e:
        raise upstream_unavailable() from e
    if result.body is None:
        return Response(status_code=result.status_code)
    return JSONResponse(status_code=result.status_code, content=result.body)
