from collections.abc import Iterable

from sqlalchemy import delete, func
from sqlmodel import Session, col, select

from src.storefront.entities.catalog.order.table import OrderTable

from .table import AddressTable, CityTable, CountryTable, StateTable, UserTable

CUSTOMER = "customer"
ADMIN = "admin"

# the location tables spell the country in English
COUNTRY_ALIASES = {"Brasil": "Brazil"}
COUNTRY_DISPLAY = {"Brazil": "Brasil"}


def country_display_name(name: str | None) -> str | None:
    return COUNTRY_DISPLAY.get(name, name) if name else name


class CustomerRepository:
    """Data-access layer for customers, their addresses and locations."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> UserTable | None:
        statement = select(UserTable).where(
            UserTable.id == user_id, UserTable.user_type == CUSTOMER
        )
        return self._session.exec(statement).first()

    def user_exists(self, user_id: int) -> bool:
        return self._session.get(UserTable, user_id) is not None

    def admin_id(self) -> int | None:
        """Id of the first admin user; store-owned records are attributed to it."""
        statement = (
            select(UserTable.id).where(UserTable.user_type == ADMIN).order_by(UserTable.id)
        )
        return self._session.exec(statement).first()

    def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        statement = select(UserTable.id).where(
            func.lower(UserTable.email) == email.lower()
        )
        if exclude_id is not None:
            statement = statement.where(UserTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def cpf_taken(self, cpf: str, exclude_id: int | None = None) -> bool:
        statement = select(UserTable.id).where(UserTable.cpf == cpf)
        if exclude_id is not None:
            statement = statement.where(UserTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def resolve_location(
        self,
        country: str | None,
        state: str | None,
        city: str | None,
        *,
        country_id: int | None = None,
        state_id: int | None = None,
        city_id: int | None = None,
    ) -> tuple[int | None, int | None, int | None]:
        """Look up location ids by (partial) name, each within its parent.

        Ids given as keywords are kept for the levels whose name is absent.
        """
        if country:
            name = COUNTRY_ALIASES.get(country, country)
            country_id = self._session.exec(
                select(CountryTable.id).where(col(CountryTable.name).ilike(f"%{name}%"))
            ).first()
        if state:
            state_id = None
            if country_id is not None:
                state_id = self._session.exec(
                    select(StateTable.id)
                    .where(col(StateTable.name).ilike(f"%{state}%"))
                    .where(StateTable.country_id == country_id)
                ).first()
        if city:
            city_id = None
            if state_id is not None:
                city_id = self._session.exec(
                    select(CityTable.id)
                    .where(col(CityTable.name).ilike(f"%{city}%"))
                    .where(CityTable.state_id == state_id)
                ).first()
        return country_id, state_id, city_id

    def add(self, row: UserTable, addresses: Iterable[AddressTable] = ()) -> UserTable:
        self._session.add(row)
        self._session.flush()
        for address in addresses:
            address.user_id = row.id
            self._session.add(address)
        self._session.flush()
        return row

    def save(self, row: UserTable | AddressTable) -> None:
        self._session.add(row)
        self._session.flush()

    def get_address(self, address_id: int) -> AddressTable | None:
        return self._session.get(AddressTable, address_id)

    def customer_address(self, user_id: int, address_id: int) -> AddressTable | None:
        statement = select(AddressTable).where(
            AddressTable.id == address_id, AddressTable.user_id == user_id
        )
        return self._session.exec(statement).first()

    def first_addresses(self, user_ids: Iterable[int]) -> dict[int, AddressTable]:
        """The lowest-id address of each user."""
        ids = set(user_ids)
        if not ids:
            return {}
        statement = (
            select(AddressTable)
            .where(col(AddressTable.user_id).in_(ids))
            .order_by(AddressTable.id)
        )
        result: dict[int, AddressTable] = {}
        for row in self._session.exec(statement):
            result.setdefault(row.user_id, row)
        return result

    def location_names(
        self, addresses: Iterable[AddressTable]
    ) -> dict[int, dict[str, str | None]]:
        """Country, state and city names keyed by address id."""
        rows = list(addresses)

        def names(table, ids):
            ids = {i for i in ids if i is not None}
            if not ids:
                return {}
            found = self._session.exec(
                select(table.id, table.name).where(col(table.id).in_(ids))
            )
            return dict(found.all())

        countries = names(CountryTable, (row.country_id for row in rows))
        states = names(StateTable, (row.state_id for row in rows))
        cities = names(CityTable, (row.city_id for row in rows))
        return {
            row.id: {
                "country": countries.get(row.country_id),
                "state": states.get(row.state_id),
                "city": cities.get(row.city_id),
            }
            for row in rows
        }

    def order_stats(self, user_id: int) -> tuple[int, int | None]:
        """Number of paid orders and the date (epoch) of the latest one."""
        paid = (OrderTable.user_id == user_id) & (OrderTable.payment_status == "paid")
        total = self._session.exec(select(func.count(OrderTable.id)).where(paid)).one()
        last = self._session.exec(
            select(OrderTable.date)
            .where(paid)
            .order_by(col(OrderTable.created_at).desc(), col(OrderTable.id).desc())
        ).first()
        return total, last

    def delete(self, row: UserTable) -> None:
        """Remove the customer's addresses, then the customer."""
        self._session.exec(delete(AddressTable).where(AddressTable.user_id == row.id))
        self._session.delete(row)
        self._session.flush()
