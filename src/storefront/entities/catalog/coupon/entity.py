"""Request payloads for discount coupons."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.storefront.entities.core import Payload

CouponType = Literal["cart_base", "product_base"]
DiscountType = Literal["amount", "percent"]


class CouponDetails(BaseModel):
    min_buy: int | None = None
    max_discount: float | None = None
    product_id: list[int] | None = None


def normalize_discount(value: float, discount_type: str | None) -> float:
    """Check a discount against its type; amounts keep two decimals.

    Raises:
        ValueError: When the value is out of range for the type.
    """
    if discount_type == "amount":
        if value < 1:
            raise ValueError("The discount must be at least 1.")
        return round(value, 2)
    if not float(value).is_integer() or not 1 <= value <= 100:
        raise ValueError("The discount must be an integer between 1 and 100.")
    return int(value)


def check_details(details: CouponDetails, coupon_type: str | None) -> None:
    """Raise ``ValueError`` when ``details`` lack what ``coupon_type`` needs."""
    if coupon_type == "cart_base":
        if details.min_buy is None or details.max_discount is None:
            raise ValueError("Cart coupons require details.min_buy and details.max_discount.")
    elif coupon_type == "product_base" and not details.product_id:
        raise ValueError("Product coupons require details.product_id.")


class CouponRules(Payload):
    """Validation shared by create and patch payloads.

    Cross-field checks read earlier fields from ``info.data``, so subclasses
    declare ``type`` before ``details``, ``discount_type`` before ``discount``
    and ``start_date`` before ``end_date``.
    """

    @field_validator("discount", check_fields=False)
    @classmethod
    def _check_discount(cls, value: float | None, info: ValidationInfo) -> float | None:
        discount_type = info.data.get("discount_type")
        # patches without a type are checked against the stored coupon
        if value is None or discount_type is None:
            return value
        return normalize_discount(value, discount_type)

    @field_validator("details", check_fields=False)
    @classmethod
    def _check_details(
        cls, value: CouponDetails | None, info: ValidationInfo
    ) -> CouponDetails | None:
        if value is None:
            return value
        check_details(value, info.data.get("type"))
        return value

    @field_validator("start_date", check_fields=False)
    @classmethod
    def _check_start(cls, value: date | None) -> date | None:
        if value is not None and value < date.today():
            raise ValueError("The start date must be today or later.")
        return value

    @field_validator("end_date", check_fields=False)
    @classmethod
    def _check_end(cls, value: date | None, info: ValidationInfo) -> date | None:
        start = info.data.get("start_date")
        if value is not None and start is not None and value < start:
            raise ValueError("The end date must be on or after the start date.")
        return value


class CouponCreate(CouponRules):
    code: str = Field(min_length=1)
    type: CouponType
    details: CouponDetails
    discount_type: DiscountType
    discount: float
    start_date: date
    end_date: date


class CouponPatch(CouponRules):
    code: str | None = Field(default=None, min_length=1)
    type: CouponType | None = None
    details: CouponDetails | None = None
    discount_type: DiscountType | None = None
    discount: float | None = None
    start_date: date | None = None
    end_date: date | None = None


class CouponCreateBody(Payload):
    coupon: CouponCreate = Field(alias="DiscountCoupon")


class CouponPatchBody(Payload):
    coupon: CouponPatch = Field(alias="DiscountCoupon")


def stored_details(details: CouponDetails) -> dict | list | None:
    """Shape ``details`` the way coupons persist them."""
    if details.product_id is not None:
        return [{"product_id": product_id} for product_id in details.product_id]
    if details.min_buy is not None or details.max_discount is not None:
        return {"min_buy": details.min_buy, "max_discount": details.max_discount}
    return None
