"""Request payloads for products and product variants."""

from datetime import date
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationInfo,
    field_validator,
)

from src.storefront.entities.core import Payload

COLOR_TYPE = "Cor"


def product_slug(name: str) -> str:
    """Slug used in storefront links: spaces, dots and commas become hyphens."""
    for char in " .,":
        name = name.replace(char, "-")
    return name


class ProductImages(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gallery: list[HttpUrl] | None = Field(default=None, min_length=1)
    miniature: HttpUrl | None = None


class ProductVideo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider: Literal["youtube", "vimeo"] | None = None
    link: HttpUrl | None = None


class ProductDiscount(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["amount", "percent"] = "percent"
    value: float
    discount_start_date: date | None = None
    discount_end_date: date | None = None

    @field_validator("value")
    @classmethod
    def _check_value(cls, value: float, info: ValidationInfo) -> float:
        if info.data.get("type") == "amount":
            if value < 1:
                raise ValueError("The discount value must be at least 1.")
            return round(value, 2)
        if not float(value).is_integer() or not 1 <= value <= 100:
            raise ValueError("The discount value must be an integer between 1 and 100.")
        return value

    @field_validator("discount_start_date")
    @classmethod
    def _check_start(cls, value: date | None) -> date | None:
        if value is not None and value < date.today():
            raise ValueError("The discount start date must be today or later.")
        return value

    @field_validator("discount_end_date")
    @classmethod
    def _check_end(cls, value: date | None, info: ValidationInfo) -> date | None:
        start = info.data.get("discount_start_date")
        if value is not None and start is not None and value < start:
            raise ValueError("The discount end date must be on or after the start date.")
        return value


class ProductMetatag(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    image: HttpUrl | None = None


class ProductCreate(Payload):
    name: str = Field(min_length=1)
    category_id: int = Field(ge=1)
    unit: Literal["pc", "un"]
    unit_price: float = Field(ge=0)
    current_stock: int = Field(ge=1)
    is_featured: bool
    is_todays_deal: bool
    published: bool
    is_discounted: bool
    discount: ProductDiscount | None = Field(default=None, validate_default=True)
    weight: int | None = Field(default=None, ge=0)
    min_qty: int | None = Field(default=None, ge=1)
    low_stock_quantity: int | None = Field(default=None, ge=1)
    tags: list[str] | None = None
    barcode: str | None = None
    is_refundable: bool | None = None
    images: ProductImages | None = None
    video: ProductVideo | None = None
    description: str | None = None
    metatag: ProductMetatag | None = None

    @field_validator("discount")
    @classmethod
    def _discount_required(
        cls, value: ProductDiscount | None, info: ValidationInfo
    ) -> ProductDiscount | None:
        if value is None and info.data.get("is_discounted"):
            raise ValueError("The discount field is required when is_discounted is true.")
        return value


class ProductPatch(Payload):
    name: str | None = Field(default=None, min_length=1)
    category_id: int | None = Field(default=None, ge=1)
    unit: Literal["pc", "un"] | None = None
    unit_price: float | None = Field(default=None, ge=0)
    current_stock: int | None = Field(default=None, ge=0)
    is_featured: bool | None = None
    is_todays_deal: bool | None = None
    published: bool | None = None
    is_discounted: bool | None = None
    discount: ProductDiscount | None = None
    weight: int | None = Field(default=None, ge=0)
    min_qty: int | None = Field(default=None, ge=1)
    low_stock_quantity: int | None = Field(default=None, ge=1)
    tags: list[str] | None = None
    barcode: str | None = None
    is_refundable: bool | None = None
    images: ProductImages | None = None
    video: ProductVideo | None = None
    description: str | None = None
    metatag: ProductMetatag | None = None


class ProductCreateBody(Payload):
    product: ProductCreate = Field(alias="Product")


class ProductPatchBody(Payload):
    product: ProductPatch = Field(alias="Product")


class VariantFields(Payload):
    """Shared shape of the variant option pairs ``type_n``/``value_n``."""

    type_1: str | None = None
    value_1: str | None = Field(default=None, validate_default=True)
    type_2: str | None = None
    value_2: str | None = Field(default=None, validate_default=True)

    @field_validator("value_1", "value_2", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("value_1", "value_2")
    @classmethod
    def _paired(cls, value: str | None, info: ValidationInfo) -> str | None:
        type_key = f"type_{info.field_name[-1]}"
        if info.data.get(type_key) and not value:
            raise ValueError(f"The {info.field_name} field is required when {type_key} is present.")
        if value and not info.data.get(type_key):
            raise ValueError(f"The {type_key} field is required when {info.field_name} is present.")
        return value

    def options(self) -> list[tuple[str, str, str]]:
        """(field name, type, value) for every option that carries a value."""
        pairs = []
        if self.type_1 and self.value_1:
            pairs.append(("value_1", self.type_1, self.value_1))
        if self.type_2 and self.value_2:
            pairs.append(("value_2", self.type_2, self.value_2))
        return pairs

    def variant_name(self) -> str | None:
        """``<color>-<other>`` when both values are present, else the single value."""
        if self.value_1 and self.value_2:
            if self.type_1 == COLOR_TYPE:
                return f"{self.value_1}-{self.value_2}"
            return f"{self.value_2}-{self.value_1}"
        return self.value_1 or self.value_2 or None


class VariantCreate(VariantFields):
    product_id: int
    price: float = Field(ge=0)
    reference: str = Field(min_length=1)
    stock: int = Field(ge=0)


class VariantPatch(VariantFields):
    product_id: int | None = None
    price: float | None = Field(default=None, ge=0)
    reference: str | None = Field(default=None, min_length=1)
    stock: int | None = Field(default=None, ge=0)


class VariantCreateBody(Payload):
    variant: VariantCreate = Field(alias="Variant")


class VariantPatchBody(Payload):
    variant: VariantPatch = Field(alias="Variant")
