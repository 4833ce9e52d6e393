"""Request payloads for colors."""

from pydantic import Field, field_validator

from src.storefront.entities.core import Payload

HEX_CODE_PATTERN = r"^#([a-fA-F0-9]{6}|[a-fA-F0-9]{3})$"


def compact_name(name: str) -> str:
    """Strip spaces, underscores, hyphens and dots from a color name."""
    for char in " _-.":
        name = name.replace(char, "")
    return name


class ColorCreate(Payload):
    name: str = Field(min_length=1)
    code: str = Field(pattern=HEX_CODE_PATTERN)
    display_name: str | None = None

    @field_validator("name")
    @classmethod
    def _compact(cls, value: str) -> str:
        return compact_name(value)


class ColorPatch(Payload):
    name: str | None = Field(default=None, min_length=1)
    code: str | None = Field(default=None, pattern=HEX_CODE_PATTERN)
    display_name: str | None = None

    @field_validator("name")
    @classmethod
    def _compact(cls, value: str | None) -> str | None:
        return compact_name(value) if value is not None else None


class ColorCreateBody(Payload):
    color: ColorCreate = Field(alias="Color")


class ColorPatchBody(Payload):
    color: ColorPatch = Field(alias="Color")
