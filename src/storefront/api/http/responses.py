"""JSON envelope shared by every endpoint.

Bodies look like ``{success, status, data?, message?, errors?, error?}``.
The body ``status`` does not always match the transport status: deletes
answer 200 with a body status of 204 and, unless disabled through
``compat.legacy_not_found_status``, missing records answer 200 with 404.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import HTTPException, RequestValidationError
from loguru import logger
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

# per-entity keys request bodies are wrapped in
ROOT_KEYS = frozenset(
    {
        "Category",
        "Color",
        "DiscountCoupon",
        "Attribute",
        "AttributeValue",
        "Product",
        "Variant",
        "Order",
    }
)

NOT_FOUND_MESSAGE = "There is no data for the given ID."
INVALID_ID_MESSAGE = "The :id parameter must be of integer type."
UNAUTHORIZED_MESSAGE = "Unauthorized access. It is necessary to pass the access token."


class EnvelopeException(HTTPException):
    """An error answered with a ready-made envelope body."""

    def __init__(
        self,
        status_code: int,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=body.get("message"), headers=headers)
        self.body = body


class NotFoundError(EnvelopeException):
    """Missing record; the transport status is chosen by configuration."""

    def __init__(self):
        super().__init__(
            404,
            {"success": False, "status": 404, "data": [], "message": NOT_FOUND_MESSAGE},
        )


def ok(data: Any) -> dict[str, Any]:
    return {"success": True, "status": 200, "data": data}


def created(entity: str, id_key: str, record_id: int | None) -> JSONResponse:
    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "code": 201,
            "status": True,
            "message": f"{entity} Created Successfully",
            id_key: record_id,
        },
    )


def updated(entity: str, id_key: str, record_id: int | None) -> JSONResponse:
    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "code": 201,
            "status": True,
            "message": f"{entity} Updated Successfully",
            id_key: record_id,
        },
    )


def deleted(entity: str) -> dict[str, Any]:
    return {"success": True, "status": 204, "message": f"{entity} deleted successfully"}


def not_found() -> NotFoundError:
    return NotFoundError()


def invalid_id() -> EnvelopeException:
    return EnvelopeException(
        400, {"success": False, "status": 400, "data": [], "message": INVALID_ID_MESSAGE}
    )


def parse_id(raw: str) -> int:
    """Validate a path identifier.

    Raises:
        EnvelopeException: 400 when ``raw`` is not an unsigned integer.
    """
    value = raw.strip()
    if not value.isdigit():
        raise invalid_id()
    return int(value)


def validation_error(errors: dict[str, list[str]]) -> EnvelopeException:
    return EnvelopeException(
        400,
        {"success": False, "status": 400, "message": "Validation error", "errors": errors},
    )


def field_error(field: str, message: str) -> EnvelopeException:
    return validation_error({field: [message]})


def conflict(message: str) -> EnvelopeException:
    return EnvelopeException(409, {"success": False, "status": 409, "message": message})


def unauthorized() -> EnvelopeException:
    return EnvelopeException(
        401, {"success": False, "status": 401, "message": UNAUTHORIZED_MESSAGE}
    )


def server_error(exc: BaseException) -> EnvelopeException:
    return EnvelopeException(
        500,
        {
            "success": False,
            "status": 500,
            "message": "Internal server error",
            "error": str(exc),
        },
    )


def upstream_unavailable() -> EnvelopeException:
    return EnvelopeException(
        502, {"success": False, "status": 502, "message": "Upstream service unavailable"}
    )


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Commit on success; roll back on any error.

    Envelope errors propagate unchanged, anything else becomes a 500 envelope
    carrying the raw error message.
    """
    try:
        yield session
        session.commit()
    except EnvelopeException:
        session.rollback()
        raise
    except Exception as exc:
        session.rollback()
        logger.exception("Transaction rolled back")
        raise server_error(exc) from exc


def error_key(loc: tuple[Any, ...], error_type: str = "") -> str:
    """Dotted field path of a request validation error, relative to the root key."""
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    if error_type == "json_invalid":
        return "body"
    if len(parts) > 1 and parts[0] in ROOT_KEYS:
        parts = parts[1:]
    return ".".join(parts) or "body"


# --- Exception handlers ---


async def envelope_exception_handler(request: Request, exc: EnvelopeException) -> JSONResponse:
    status_code = exc.status_code
    if isinstance(exc, NotFoundError):
        config = request.app.state.config
        status_code = 200 if config.compat.legacy_not_found_status else 404
    return JSONResponse(status_code=status_code, content=exc.body, headers=exc.headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        key = error_key(tuple(error.get("loc", ())), error.get("type", ""))
        errors.setdefault(key, []).append(error.get("msg", "Invalid value"))
    logger.bind(fields=sorted(errors)).info("request.validation_error")
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(validation_error(errors).body),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Envelope for framework errors such as unknown routes."""
    if exc.status_code == 404:
        body = {"data": [], "success": False, "status": 404, "message": "Invalid Route"}
    else:
        body = {"success": False, "status": exc.status_code, "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)
