"""Seed data for the catalog tables."""

from __future__ import annotations

from typing import Any

import pytest
from sqlmodel import Session

from src.storefront.entities.catalog.attribute import AttributeTable, AttributeValueTable
from src.storefront.entities.catalog.category import CategoryTable
from src.storefront.entities.catalog.color import ColorTable
from src.storefront.entities.catalog.coupon import CouponTable, CouponUsageTable
from src.storefront.entities.catalog.customer import (
    AddressTable,
    CityTable,
    CountryTable,
    StateTable,
    UserTable,
)
from src.storefront.entities.catalog.order import (
    CombinedOrderTable,
    OrderDetailTable,
    OrderTable,
)
from src.storefront.entities.catalog.product import ProductStockTable, ProductTable
from src.storefront.entities.catalog.upload import UploadTable

VALID_CPF = "529.982.247-25"
OTHER_VALID_CPF = "111.444.777-35"


class CatalogSeed:
    """Inserts and commits rows so the application sees them immediately."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _save(self, row: Any) -> Any:
        self.session.add(row)
        self.session.commit()
        return row

    def admin(self, name: str = "Store Admin") -> UserTable:
        return self._save(UserTable(user_type="admin", name=name, email="admin@shop.test"))

    def customer(
        self,
        name: str = "Maria Silva",
        email: str = "maria@example.com",
        cpf: str = "52998224725",
    ) -> UserTable:
        return self._save(
            UserTable(user_type="customer", name=name, email=email, cpf=cpf, phone="11999990000")
        )

    def location(
        self, country: str = "Brazil", state: str = "Sao Paulo", city: str = "Campinas"
    ) -> tuple[CountryTable, StateTable, CityTable]:
        country_row = self._save(CountryTable(code="BR", name=country))
        state_row = self._save(StateTable(name=state, country_id=country_row.id))
        city_row = self._save(CityTable(name=city, state_id=state_row.id))
        return country_row, state_row, city_row

    def address(self, user: UserTable, **fields: Any) -> AddressTable:
        values = {
            "address": "Rua das Flores, 10",
            "postal_code": "13000000",
            "phone": "1933330000",
            "correios": "SEDEX",
            "valor_correios": 20.5,
            "set_default": 1,
        }
        values.update(fields)
        return self._save(AddressTable(user_id=user.id, **values))

    def category(
        self, name: str = "Roupas", slug: str | None = None, parent_id: int = 0, **fields: Any
    ) -> CategoryTable:
        return self._save(
            CategoryTable(
                name=name,
                slug=slug or name.lower(),
                parent_id=parent_id,
                level=0 if parent_id == 0 else 1,
                **fields,
            )
        )

    def color(self, name: str = "Azul", code: str = "#0000FF") -> ColorTable:
        return self._save(ColorTable(name=name, code=code))

    def attribute(self, name: str = "Tamanho", values: tuple[str, ...] = ("P", "M")):
        row = self._save(AttributeTable(name=name))
        for value in values:
            self._save(AttributeValueTable(attribute_id=row.id, value=value))
        return row

    def upload(self, file_name: str | None = None, external_link: str | None = None):
        return self._save(UploadTable(file_name=file_name, external_link=external_link))

    def product(
        self, name: str = "Camiseta", category: CategoryTable | None = None, **fields: Any
    ) -> ProductTable:
        values = {"unit_price": 100.0, "current_stock": 10}
        values.update(fields)
        return self._save(
            ProductTable(
                name=name,
                slug=name.replace(" ", "-"),
                category_id=category.id if category else 0,
                **values,
            )
        )

    def variant(
        self, product: ProductTable, variant: str = "Azul-M", **fields: Any
    ) -> ProductStockTable:
        values = {"sku": "1001", "price": 100.0, "qty": 5}
        values.update(fields)
        return self._save(ProductStockTable(product_id=product.id, variant=variant, **values))

    def coupon(self, code: str = "PROMO10", **fields: Any) -> CouponTable:
        values = {
            "type": "cart_base",
            "details": {"min_buy": 100, "max_discount": 50},
            "discount": 10,
            "discount_type": "percent",
            "start_date": 1714521600,
            "end_date": 1717200000,
        }
        values.update(fields)
        return self._save(CouponTable(code=code, **values))

    def coupon_usage(self, coupon: CouponTable, user: UserTable) -> CouponUsageTable:
        return self._save(CouponUsageTable(coupon_id=coupon.id, user_id=user.id))

    def order(
        self,
        user: UserTable,
        product: ProductTable,
        *,
        variation: str = "Azul-M",
        payment_status: str = "paid",
        **fields: Any,
    ) -> OrderTable:
        combined = self._save(CombinedOrderTable(user_id=user.id, grand_total=120.5))
        values = {
            "delivery_status": "pending",
            "payment_type": "credit_card",
            "grand_total": 120.5,
            "date": 1714521600,
            "shipping_address": {
                "address": "Rua das Flores, 10",
                "correios": "SEDEX",
                "valor_correios": 20.5,
                "city": "Campinas",
                "name": user.name,
                "email": user.email,
            },
        }
        values.update(fields)
        order = self._save(
            OrderTable(
                combined_order_id=combined.id,
                user_id=user.id,
                payment_status=payment_status,
                **values,
            )
        )
        self._save(
            OrderDetailTable(
                order_id=order.id,
                product_id=product.id,
                variation=variation,
                price=product.unit_price,
                shipping_cost=20.5,
                quantity=1,
                payment_status=payment_status,
            )
        )
        return order


@pytest.fixture
def catalog(session: Session) -> CatalogSeed:
    return CatalogSeed(session)
