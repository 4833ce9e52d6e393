"""Entity package: customers (users), addresses and locations."""

from .table import AddressTable, CityTable, CountryTable, StateTable, UserTable  # isort: skip
from .entity import (
    CustomerAddressCreate,
    CustomerAddressPatch,
    CustomerCreate,
    CustomerPatch,
)
from .repository import CustomerRepository, country_display_name

__all__ = [
    "AddressTable",
    "CityTable",
    "CountryTable",
    "CustomerAddressCreate",
    "CustomerAddressPatch",
    "CustomerCreate",
    "CustomerPatch",
    "CustomerRepository",
    "StateTable",
    "UserTable",
    "country_display_name",
]
