"""User, address and location tables."""

from sqlmodel import Field

from src.storefront.entities.core import EntityTable


class UserTable(EntityTable, table=True):
    """Store account. Customers have ``user_type == "customer"``."""

    __tablename__ = "users"

    user_type: str = Field(default="customer", index=True, max_length=32)
    name: str
    email: str | None = Field(default=None, index=True)
    cpf: str | None = Field(default=None, index=True, max_length=32)
    phone: str | None = None
    password: str | None = None


class AddressTable(EntityTable, table=True):
    __tablename__ = "addresses"

    user_id: int = Field(index=True)
    address: str | None = None
    country_id: int | None = None
    state_id: int | None = None
    city_id: int | None = None
    postal_code: str | None = None
    phone: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    set_default: int = 0
    # shipping carrier and quoted price, copied into order snapshots
    correios: str | None = None
    valor_correios: float | None = None


class CountryTable(EntityTable, table=True):
    __tablename__ = "countries"

    code: str | None = Field(default=None, max_length=8)
    name: str = Field(index=True)


class StateTable(EntityTable, table=True):
    __tablename__ = "states"

    name: str = Field(index=True)
    country_id: int = Field(index=True)


class CityTable(EntityTable, table=True):
    __tablename__ = "cities"

    name: str = Field(index=True)
    state_id: int = Field(index=True)
