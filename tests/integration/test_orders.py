"""Order endpoints end to end."""

import pytest
from sqlmodel import Session, select

from src.storefront.entities.catalog.order import (
    CombinedOrderTable,
    OrderDetailTable,
    OrderTable,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def buyer(catalog):
    """A customer with a shipping address and a product to buy."""
    country, state, city = catalog.location()
    user = catalog.customer()
    address = catalog.address(
        user, country_id=country.id, state_id=state.id, city_id=city.id
    )
    category = catalog.category("Camisetas")
    product = catalog.product("Polo", category=category, unit_price=80.0)
    return user, address, product


def order_body(user_id: int, address_id: int, product_id: int, **fields) -> dict:
    data = {
        "user_id": user_id,
        "shipping_address_id": address_id,
        "delivery_status": "PENDING",
        "payment_type": "credit_card",
        "payment_status": "unpaid",
        "grand_total": 100.5,
        "date": "2024-05-10",
        "details": [{"product_id": product_id, "variation": "Azul-M", "quantity": 2}],
    }
    data.update(fields)
    return {"Order": data}


class TestOrderCreate:
    """Placing orders."""

    def test_create(self, client, buyer, engine):
        user, address, product = buyer

        response = client.post("/api/orders", json=order_body(user.id, address.id, product.id))

        assert response.status_code == 201
        assert response.json()["message"] == "Order Created Successfully"
        with Session(engine) as session:
            order = session.get(OrderTable, response.json()["order_id"])
            assert order.seller_id == 9
            assert order.delivery_status == "pending"
            assert order.shipping_address["city"] == "Campinas"
            assert order.shipping_address["correios"] == "SEDEX"
            assert order.shipping_address["name"] == "Maria Silva"
            combined = session.get(CombinedOrderTable, order.combined_order_id)
            assert combined.grand_total == 100.5
            line = session.exec(select(OrderDetailTable)).one()
            assert line.order_id == order.id
            assert line.price == 80.0
            assert line.shipping_cost == 20.5
            assert line.quantity == 2

    def test_unknown_user(self, client, buyer):
        _, address, product = buyer

        response = client.post("/api/orders", json=order_body(99, address.id, product.id))

        assert response.status_code == 400
        assert response.json()["errors"] == {
            "user_id": ["There is no user with the given user_id: 99"]
        }

    def test_unknown_address(self, client, buyer):
        user, _, product = buyer

        response = client.post("/api/orders", json=order_body(user.id, 77, product.id))

        assert response.status_code == 400
        assert "shipping_address_id" in response.json()["errors"]

    def test_unknown_product(self, client, buyer, engine):
        user, address, _ = buyer

        response = client.post("/api/orders", json=order_body(user.id, address.id, 55))

        assert response.status_code == 400
        assert response.json()["errors"] == {
            "details.0.product_id": ["There is no product with the given product_id: 55"]
        }
        with Session(engine) as session:
            assert session.exec(select(OrderTable)).all() == []

    def test_paid_without_payment_data(self, client, buyer):
        user, address, product = buyer

        response = client.post(
            "/api/orders",
            json=order_body(user.id, address.id, product.id, payment_status="paid"),
        )

        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"payment_details", "code"}

    def test_unknown_delivery_status(self, client, buyer):
        user, address, product = buyer

        response = client.post(
            "/api/orders",
            json=order_body(user.id, address.id, product.id, delivery_status="lost"),
        )

        assert response.status_code == 400
        assert "delivery_status" in response.json()["errors"]


class TestOrderRead:
    """Order views."""

    def test_show(self, client, catalog, buyer):
        user, _, product = buyer
        order = catalog.order(user, product, payment_status="unpaid")

        data = client.get(f"/api/orders/{order.id}").json()["data"]["Order"]

        assert data["status_pagamento"] == "PENDENTE DE PAGAMENTO"
        assert data["status_entrega"] == "A ENVIAR"
        assert data["date"] == "2024-05-01"
        assert data["customer_id"] == user.id
        assert data["partial_total"] == "80.00"
        assert data["shipment"] == "SEDEX"
        assert data["shipment_value"] == "20.50"
        assert data["total"] == "120.50"
        assert data["payment_date"] == "0000-00-00"
        assert data["has_payment"] == 0
        assert data["has_shipment"] == 1
        assert data["payment_method_id"] is None
        assert data["billing_address"] == {
            "address": "Rua das Flores, 10",
            "city": "Campinas",
        }
        assert data["ProductsSold"] == {"id": product.id}

    def test_paid_order(self, client, catalog, buyer):
        user, _, product = buyer
        order = catalog.order(
            user,
            product,
            payment_details={"card_type": "visa", "dateTime": "2024-05-02T10:00:00"},
        )

        data = client.get(f"/api/orders/{order.id}").json()["data"]["Order"]

        assert data["status_pagamento"] == "PAGO"
        assert data["payment_form"] == "visa"
        assert data["payment_date"] == "2024-05-02"
        assert data["has_payment"] == 1

    def test_complete(self, client, catalog, buyer):
        user, address, product = buyer
        variant = catalog.variant(product, "Azul-M", sku="1001")
        order = catalog.order(user, product)

        data = client.get(f"/api/orders/{order.id}/complete").json()["data"]["Order"]

        customer = data["Customer"]
        assert customer["id"] == user.id
        assert customer["country"] == "Brasil"
        assert customer["CustomerAddress"]["id"] == address.id
        assert customer["Extensions"] == {"profile": "customer"}
        sold = customer["ProductsSold"][0]["ProductSold"]
        assert sold["name"] == "Polo"
        assert sold["price"] == "80.00"
        assert sold["reference"] == "1001"
        assert sold["variant_id"] == variant.id
        assert sold["Sku"] == [
            {"type": "Cor", "value": "Azul"},
            {"type": "Tamanho", "value": "M"},
        ]
        assert sold["Category"] == {
            "id": product.category_id,
            "name": "Camisetas",
            "main_category_id": None,
            "main_category_name": None,
        }
        assert sold["url"]["https"] == "https://homolog.test/produto/Polo"

    def test_list_one_row_per_order(self, client, catalog, buyer, session):
        user, _, product = buyer
        order = catalog.order(user, product)
        session.add(OrderDetailTable(order_id=order.id, product_id=product.id, price=10))
        session.commit()

        data = client.get("/api/orders").json()["data"]

        assert data["paging"]["total"] == 1
        assert [item["Order"]["id"] for item in data["Orders"]] == [order.id]


class TestOrderUpdateDelete:
    """Order updates and removal."""

    def test_mark_paid(self, client, catalog, buyer, engine):
        user, _, product = buyer
        order = catalog.order(user, product, payment_status="unpaid")

        response = client.put(
            f"/api/orders/{order.id}",
            json={
                "Order": {
                    "payment_status": "PAID",
                    "payment_details": {"dateTime": "2024-05-03T08:30:00"},
                    "code": "TX-1",
                    "grand_total": 99.999,
                }
            },
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Order Updated Successfully"
        with Session(engine) as session:
            stored = session.get(OrderTable, order.id)
            assert stored.payment_status == "paid"
            assert stored.code == "TX-1"
            assert stored.grand_total == 100.0
            assert session.get(CombinedOrderTable, stored.combined_order_id).grand_total == 100.0
        shown = client.get(f"/api/orders/{order.id}").json()["data"]["Order"]
        assert shown["payment_date"] == "2024-05-03"

    def test_new_address_replaces_snapshot(self, client, catalog, buyer, engine):
        user, _, product = buyer
        order = catalog.order(user, product)
        other = catalog.address(user, address="Rua Nova, 5", correios="PAC")

        client.put(f"/api/orders/{order.id}", json={"Order": {"shipping_address_id": other.id}})

        with Session(engine) as session:
            snapshot = session.get(OrderTable, order.id).shipping_address
            assert snapshot["address"] == "Rua Nova, 5"
            assert snapshot["correios"] == "PAC"

    def test_delete(self, client, catalog, buyer, engine):
        user, _, product = buyer
        order = catalog.order(user, product)

        response = client.delete(f"/api/orders/{order.id}")

        assert response.json()["message"] == "Order deleted successfully"
        with Session(engine) as session:
            assert session.get(OrderTable, order.id) is None
            assert session.exec(select(OrderDetailTable)).all() == []
            assert session.exec(select(CombinedOrderTable)).all() == []
