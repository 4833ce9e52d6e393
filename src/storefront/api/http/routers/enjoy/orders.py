"""Proxy to the upstream order endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import Field
from starlette.responses import Response

from src.storefront.api.http.deps import get_upstream
from src.storefront.api.http.routers.enjoy.relay import relay
from src.storefront.core.services import UpstreamClient
from src.storefront.entities.core import Payload

router = APIRouter(prefix="/orders", tags=["enjoy"])


class EnjoyOrder(Payload):
    customer: dict[str, Any] | None = Field(default=None, alias="Customer")
    payment_form: str | None = None
    shipment_value: float | None = None

    def upstream_body(self) -> dict:
        data: dict = {}
        if self.customer is not None:
            data["customer"] = self.customer
        if self.payment_form is not None:
            data["payment_type"] = self.payment_form
        if self.shipment_value is not None:
            data["shipment_value"] = self.shipment_value
        return data


class EnjoyOrderBody(Payload):
    order: EnjoyOrder = Field(default_factory=EnjoyOrder, alias="Order")


@router.get("")
async def list_orders(upstream: UpstreamClient = Depends(get_upstream)) -> Response:
    return await relay(upstream.get("api/orders"))


@router.post("")
async def create_order(
    body: EnjoyOrderBody, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.post("api/order", json=body.order.upstream_body()))


@router.get("/{order_id}")
async def get_order(
    order_id: str, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.get(f"api/order/{order_id}"))


@router.put("/{order_id}")
async def update_order(
    order_id: str,
    body: EnjoyOrderBody,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    return await relay(upstream.put(f"api/order/{order_id}", json=body.order.upstream_body()))


@router.delete("/{order_id}")
async def delete_order(
    order_id: str, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.delete(f"api/order/{order_id}"))
