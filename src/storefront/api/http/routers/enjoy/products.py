"""Proxy to the upstream product endpoints."""

from fastapi import APIRouter, Depends
from pydantic import Field
from starlette.responses import Response

from src.storefront.api.http.deps import get_upstream
from src.storefront.api.http.routers.enjoy.relay import relay
from src.storefront.core.services import UpstreamClient
from src.storefront.entities.core import Payload

router = APIRouter(prefix="/products", tags=["enjoy"])

ADDED_BY = "pdv"


class EnjoyProduct(Payload):
    name: str | None = None
    category_id: int | None = None
    brand: str | None = None
    weight: float | None = None
    price: float | None = None
    description: str | None = None
    stock: int | None = None

    def upstream_body(self) -> dict:
        """Field names the upstream product API expects."""
        data: dict = {"added_by": ADDED_BY}
        if self.name is not None:
            data["name"] = self.name
            data["slug"] = self.name
        renamed = {
            "category_id": "category_id",
            "brand": "brand_name",
            "weight": "weight",
            "price": "unit_price",
            "description": "description",
            "stock": "current_stock",
        }
        for field, key in renamed.items():
            value = getattr(self, field)
            if value is not None:
                data[key] = value
        return data


class EnjoyProductBody(Payload):
    product: EnjoyProduct = Field(default_factory=EnjoyProduct, alias="Product")


@router.get("")
async def list_products(upstream: UpstreamClient = Depends(get_upstream)) -> Response:
    return await relay(upstream.get("api/products"))


@router.post("")
async def create_product(
    body: EnjoyProductBody, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.post("api/product", json=body.product.upstream_body()))


@router.get("/{product_id}")
async def get_product(
    product_id: str, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.get(f"api/product/{product_id}"))


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    body: EnjoyProductBody,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    return await relay(
        upstream.put(f"api/product/{product_id}", json=body.product.upstream_body())
    )


@router.delete("/{product_id}")
async def delete_product(
    product_id: str, upstream: UpstreamClient = Depends(get_upstream)
) -> Response:
    return await relay(upstream.delete(f"api/product/{product_id}"))
