from collections.abc import Iterable

from sqlalchemy import delete
from sqlalchemy.orm import aliased
from sqlmodel import Session, col, select

from src.storefront.entities.catalog.category.table import CategoryTable
from src.storefront.entities.catalog.customer.table import (
    AddressTable,
    CityTable,
    CountryTable,
    StateTable,
    UserTable,
)
from src.storefront.entities.catalog.product.table import ProductStockTable, ProductTable

from .table import CombinedOrderTable, OrderDetailTable, OrderTable

# keys of the shipping snapshot that are not part of the billing address
SHIPPING_ONLY_KEYS = ("name", "email", "correios", "valor_correios")


class OrderRepository:
    """Data-access layer for orders and their lines."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, order_id: int) -> OrderTable | None:
        return self._session.get(OrderTable, order_id)

    def user_exists(self, user_id: int) -> bool:
        return self._session.get(UserTable, user_id) is not None

    def product_prices(self, product_ids: Iterable[int]) -> dict[int, float]:
        ids = set(product_ids)
        if not ids:
            return {}
        statement = select(ProductTable.id, ProductTable.unit_price).where(
            col(ProductTable.id).in_(ids)
        )
        return dict(self._session.exec(statement).all())

    def shipping_snapshot(self, address_id: int) -> dict | None:
        """Address, location names and recipient copied onto an order."""
        statement = (
            select(
                AddressTable.address,
                AddressTable.correios,
                AddressTable.postal_code,
                AddressTable.phone,
                AddressTable.valor_correios,
                CountryTable.name.label("country"),
                StateTable.name.label("state"),
                CityTable.name.label("city"),
                UserTable.name.label("name"),
                UserTable.email.label("email"),
            )
            .join(CountryTable, CountryTable.id == AddressTable.country_id, isouter=True)
            .join(StateTable, StateTable.id == AddressTable.state_id, isouter=True)
            .join(CityTable, CityTable.id == AddressTable.city_id, isouter=True)
            .join(UserTable, UserTable.id == AddressTable.user_id, isouter=True)
            .where(AddressTable.id == address_id)
        )
        row = self._session.exec(statement).first()
        return dict(row._mapping) if row is not None else None

    def place(
        self,
        order: OrderTable,
        details: list[OrderDetailTable],
    ) -> OrderTable:
        """Insert the combined order, the order and its lines."""
        combined = CombinedOrderTable(
            user_id=order.user_id,
            shipping_address=order.shipping_address,
            grand_total=order.grand_total,
        )
        self._session.add(combined)
        self._session.flush()

        order.combined_order_id = combined.id
        self._session.add(order)
        self._session.flush()

        for detail in details:
            detail.order_id = order.id
            self._session.add(detail)
        self._session.flush()
        return order

    def write(self, order: OrderTable, changes: dict) -> OrderTable:
        """Apply order ``changes`` and mirror the shared ones on the combined order."""
        order.apply(changes)
        self._session.add(order)

        combined = (
            self._session.get(CombinedOrderTable, order.combined_order_id)
            if order.combined_order_id
            else None
        )
        shared = {
            key: changes[key]
            for key in ("user_id", "shipping_address", "grand_total")
            if key in changes
        }
        if combined is not None and shared:
            combined.apply(shared)
            self._session.add(combined)
        self._session.flush()
        return order

    def first_details(self, order_ids: Iterable[int]) -> dict[int, OrderDetailTable]:
        """The first line of each order."""
        ids = set(order_ids)
        if not ids:
            return {}
        statement = (
            select(OrderDetailTable)
            .where(col(OrderDetailTable.order_id).in_(ids))
            .order_by(OrderDetailTable.id)
        )
        result: dict[int, OrderDetailTable] = {}
        for row in self._session.exec(statement):
            result.setdefault(row.order_id, row)
        return result

    def customer_with_address(self, user_id: int):
        """The order's customer joined with their first address and location names."""
        statement = (
            select(
                UserTable,
                AddressTable,
                CountryTable.name.label("country"),
                StateTable.name.label("state"),
                CityTable.name.label("city"),
            )
            .join(AddressTable, AddressTable.user_id == UserTable.id, isouter=True)
            .join(CountryTable, CountryTable.id == AddressTable.country_id, isouter=True)
            .join(StateTable, StateTable.id == AddressTable.state_id, isouter=True)
            .join(CityTable, CityTable.id == AddressTable.city_id, isouter=True)
            .where(UserTable.id == user_id)
            .order_by(AddressTable.id)
        )
        return self._session.exec(statement).first()

    def products_sold(self, order_id: int) -> list:
        """Order lines with product, category, parent category and variant."""
        parent = aliased(CategoryTable)
        statement = (
            select(
                OrderDetailTable,
                ProductTable,
                CategoryTable,
                parent.name.label("main_category"),
                ProductStockTable.id.label("variant_id"),
                ProductStockTable.sku.label("sku"),
            )
            .join(ProductTable, ProductTable.id == OrderDetailTable.product_id, isouter=True)
            .join(CategoryTable, CategoryTable.id == ProductTable.category_id, isouter=True)
            .join(parent, parent.id == CategoryTable.parent_id, isouter=True)
            .join(
                ProductStockTable,
                (ProductStockTable.product_id == OrderDetailTable.product_id)
                & (ProductStockTable.variant == OrderDetailTable.variation),
                isouter=True,
            )
            .where(OrderDetailTable.order_id == order_id)
            .order_by(OrderDetailTable.id)
        )
        return list(self._session.exec(statement).all())

    def delete(self, order: OrderTable) -> None:
        """Remove the order's lines and combined order, then the order."""
        self._session.exec(
            delete(OrderDetailTable).where(OrderDetailTable.order_id == order.id)
        )
        if order.combined_order_id:
            self._session.exec(
                delete(CombinedOrderTable).where(
                    CombinedOrderTable.id == order.combined_order_id
                )
            )
        self._session.delete(order)
        self._session.flush()
