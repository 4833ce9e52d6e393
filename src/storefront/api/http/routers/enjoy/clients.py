"""Proxy to the upstream client (customer) endpoints."""

from fastapi import APIRouter, Depends
from pydantic import Field
from starlette.responses import Response

from src.storefront.api.http.deps import get_upstream
from src.storefront.api.http.routers.enjoy.relay import relay
from src.storefront.core.services import UpstreamClient
from src.storefront.entities.core import Payload

router = APIRouter(prefix="/clients", tags=["enjoy"])


class EnjoyCustomer(Payload):
    name: str | None = None
    rg: str | None = None
    cpf: str | None = None
    phone: str | None = None
    cellphone: str | None = None
    email: str | None = None
    address: str | None = None
    zip_code: str | None = None
    number: str | None = None
    complement: str | None = None
    city: str | None = None
    state: str | None = None


class EnjoyCustomerBody(Payload):
    customer: EnjoyCustomer = Field(default_factory=EnjoyCustomer, alias="Customer")

    def upstream_body(self) -> dict:
        return self.customer.model_dump(exclude_none=True)


@router.get("")
async def list_clients(upstream: UpstreamClient = Depends(get_upstream)) -> Response:
    return await relay(upstream.get("api/clients"))


@router.post("")
async def create_client(
    body: EnjoyCustomerBody, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.post("api/client", json=body.upstream_body()))


@router.get("/{client_id}")
async def get_client(
    client_id: str, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.get(f"api/client/{client_id}"))


@router.put("/{client_id}")
async def update_client(
    client_id: str,
    body: EnjoyCustomerBody,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    return await relay(upstream.put(f"api/client/{client_id}", json=body.upstream_body()))


@router.delete("/{client_id}")
async def delete_client(
    client_id: str, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.delete(f"api/client/{client_id}"))
