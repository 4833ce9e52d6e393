"""Request payloads for orders."""

import datetime
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, ValidationInfo, field_validator

from src.storefront.entities.core import Payload

DeliveryStatus = Literal["pending", "delivered", "confirmed", "cancelled", "on_the_way"]
PaymentStatus = Literal["paid", "unpaid"]


class OrderDetailCreate(BaseModel):
    product_id: int
    variation: str
    quantity: int = Field(ge=1)


class OrderRules(Payload):
    """Validation shared by create and patch payloads.

    ``payment_details`` and ``code`` are required once an order is paid, so
    subclasses declare ``payment_status`` before both of them.
    """

    @field_validator("delivery_status", "payment_status", mode="before", check_fields=False)
    @classmethod
    def _lower(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("payment_details", "code", check_fields=False)
    @classmethod
    def _required_when_paid(cls, value, info: ValidationInfo):
        if value is None and info.data.get("payment_status") == "paid":
            raise ValueError(f"The {info.field_name} field is required when the order is paid.")
        return value

    @field_validator("grand_total", "coupon_discount", check_fields=False)
    @classmethod
    def _two_decimals(cls, value: float | None) -> float | None:
        return None if value is None else round(value, 2)


class OrderCreate(OrderRules):
    user_id: int
    shipping_address_id: int
    delivery_status: DeliveryStatus
    payment_type: str = Field(min_length=1)
    payment_status: PaymentStatus
    payment_details: dict | None = Field(default=None, validate_default=True)
    grand_total: float = Field(ge=0)
    coupon_discount: float = Field(default=0, ge=0)
    code: str | None = Field(default=None, validate_default=True)
    tracking_code: str | None = None
    date: datetime.date
    ids_traking: str | None = None
    url_traking: HttpUrl | None = None
    details: list[OrderDetailCreate] = Field(min_length=1)


class OrderPatch(OrderRules):
    user_id: int | None = None
    shipping_address_id: int | None = None
    delivery_status: DeliveryStatus | None = None
    payment_type: str | None = Field(default=None, min_length=1)
    payment_status: PaymentStatus | None = None
    payment_details: dict | None = None
    grand_total: float | None = Field(default=None, ge=0)
    coupon_discount: float | None = Field(default=None, ge=0)
    code: str | None = None
    tracking_code: str | None = None
    date: datetime.date | None = None
    ids_traking: str | None = None
    url_traking: HttpUrl | None = None


class OrderCreateBody(Payload):
    order: OrderCreate = Field(alias="Order")


class OrderPatchBody(Payload):
    order: OrderPatch = Field(alias="Order")
