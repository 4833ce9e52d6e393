"""Request payloads for attributes and attribute values."""

from pydantic import Field, field_validator

from src.storefront.entities.core import Payload


def _as_text(value: str | int) -> str:
    return str(value).strip()


class AttributeCreate(Payload):
    name: str = Field(min_length=1)
    values: list[str | int]

    @field_validator("values")
    @classmethod
    def _normalize_values(cls, values: list[str | int]) -> list[str]:
        return [_as_text(value) for value in values]


class AttributePatch(Payload):
    name: str | None = Field(default=None, min_length=1)
    values: list[str | int] | None = None

    @field_validator("values")
    @classmethod
    def _normalize_values(cls, values: list[str | int] | None) -> list[str] | None:
        return None if values is None else [_as_text(value) for value in values]


class AttributeValueCreate(Payload):
    value: str | int
    attribute_id: int

    @field_validator("value")
    @classmethod
    def _normalize_value(cls, value: str | int) -> str:
        return _as_text(value)


class AttributeValuePatch(Payload):
    value: str | int | None = None
    attribute_id: int | None = None

    @field_validator("value")
    @classmethod
    def _normalize_value(cls, value: str | int | None) -> str | None:
        return None if value is None else _as_text(value)


class AttributeCreateBody(Payload):
    attribute: AttributeCreate = Field(alias="Attribute")


class AttributePatchBody(Payload):
    attribute: AttributePatch = Field(alias="Attribute")


class AttributeValueCreateBody(Payload):
    attribute_value: AttributeValueCreate = Field(alias="AttributeValue")


class AttributeValuePatchBody(Payload):
    attribute_value: AttributeValuePatch = Field(alias="AttributeValue")
