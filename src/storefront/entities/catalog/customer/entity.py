"""Request payloads for customers.

Customer bodies are not wrapped in a root key, unlike the other resources.
"""

from pydantic import BaseModel, EmailStr, Field, StrictBool, field_validator

from src.storefront.core.formatting import is_valid_cpf
from src.storefront.entities.core import Payload


def _check_cpf(value: str | None) -> str | None:
    if value is not None and not is_valid_cpf(value):
        raise ValueError("The cpf is not a valid CPF number.")
    return value


class CustomerAddressCreate(BaseModel):
    address: str = Field(min_length=1)
    country: str = Field(min_length=1)
    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    default_address: StrictBool


class CustomerAddressPatch(Payload):
    id: int
    address: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    zip_code: str | None = None
    default_address: StrictBool | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class CustomerCreate(Payload):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str | None = None
    cpf: str
    phone: str = Field(min_length=1)
    addresses: list[CustomerAddressCreate] = Field(alias="CustomerAddress", min_length=1)

    @field_validator("cpf")
    @classmethod
    def _valid_cpf(cls, value: str) -> str:
        return _check_cpf(value)


class CustomerPatch(Payload):
    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    password: str | None = None
    cpf: str | None = None
    phone: str | None = None
    addresses: list[CustomerAddressPatch] | None = Field(
        default=None, alias="CustomerAddress"
    )

    @field_validator("cpf")
    @classmethod
    def _valid_cpf(cls, value: str | None) -> str | None:
        return _check_cpf(value)
