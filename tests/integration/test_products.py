"""Product endpoints end to end."""

from datetime import date, timedelta

import pytest
from sqlmodel import Session, select

from src.storefront.entities.catalog.product import ProductStockTable, ProductTable
from src.storefront.entities.catalog.upload import UploadTable
from src.storefront.runtime.config.config_data import ListingConfig

pytestmark = pytest.mark.integration


def product_body(category_id: int, **fields) -> dict:
    data = {
        "name": "Camiseta Polo",
        "category_id": category_id,
        "unit": "un",
        "unit_price": 89.9,
        "current_stock": 12,
        "is_featured": True,
        "is_todays_deal": False,
        "published": True,
        "is_discounted": False,
    }
    data.update(fields)
    return {"Product": data}


class TestProductCreate:
    """Creating products."""

    def test_create(self, client, catalog, engine):
        admin = catalog.admin()
        category = catalog.category()
        body = product_body(
            category.id,
            tags=["polo", "verao"],
            images={"gallery": ["https://cdn.test/a.png", "https://cdn.test/b.png"]},
            metatag={"title": "Polo", "description": "Camiseta polo"},
        )

        response = client.post("/api/products", json=body)

        assert response.status_code == 201
        assert response.json()["message"] == "Product Created Successfully"
        with Session(engine) as session:
            row = session.get(ProductTable, response.json()["product_id"])
            assert row.slug == "Camiseta-Polo"
            assert row.user_id == admin.id
            assert row.featured == 1
            assert row.tags == "polo,verao"
            assert row.meta_title == "Polo"
            assert len(row.photos.split(",")) == 2
            assert len(session.exec(select(UploadTable)).all()) == 2

    def test_unknown_category(self, client):
        response = client.post("/api/products", json=product_body(5))

        assert response.status_code == 400
        assert response.json()["errors"] == {
            "category_id": ["The specified category_id does not exist"]
        }

    def test_discount_required(self, client, catalog):
        category = catalog.category()

        response = client.post(
            "/api/products", json=product_body(category.id, is_discounted=True)
        )

        assert response.status_code == 400
        assert "discount" in response.json()["errors"]

    def test_discount(self, client, catalog, engine):
        category = catalog.category()
        start = date.today()
        body = product_body(
            category.id,
            is_discounted=True,
            discount={
                "type": "percent",
                "value": 10,
                "discount_start_date": start.isoformat(),
                "discount_end_date": (start + timedelta(days=7)).isoformat(),
            },
        )

        product_id = client.post("/api/products", json=body).json()["product_id"]

        shown = client.get(f"/api/products/{product_id}").json()["data"]["Product"]
        assert shown["price"] == "89.90"
        assert shown["promotional_price"] == "80.90"
        assert shown["percentage_discount"] == "10.00"
        assert shown["start_promotion"] == start.isoformat()

    def test_unit_must_be_known(self, client, catalog):
        category = catalog.category()

        response = client.post("/api/products", json=product_body(category.id, unit="kg"))

        assert response.status_code == 400
        assert "unit" in response.json()["errors"]


class TestProductRead:
    """Product show and list views."""

    def test_show(self, client, catalog):
        root = catalog.category("Roupas")
        leaf = catalog.category("Camisetas", parent_id=root.id)
        upload = catalog.upload(file_name="uploads/polo.png")
        product = catalog.product("Polo Azul", category=leaf, photos=str(upload.id))
        catalog.variant(product, "Azul-M")
        catalog.variant(product, "Preto-G", sku="1002")

        data = client.get(f"/api/products/{product.id}").json()["data"]["Product"]

        assert data["slug"] == "Polo-Azul"
        assert data["name"] == "Polo Azul"
        assert data["price"] == "100.00"
        assert data["promotional_price"] == "100.00"
        assert data["start_promotion"] == "0000-00-00"
        assert data["end_promotion"] == "0000-00-00"
        assert data["category_name"] == "Camisetas"
        assert data["available"] == "1"
        assert data["quantity_sold"] == 0
        assert data["url"] == {
            "http": "http://homolog.test/produto/Polo-Azul",
            "https": "https://homolog.test/produto/Polo-Azul",
        }
        assert data["Properties"] == [{"tamanho": ["M", "G"], "cor": ["Azul", "Preto"]}]
        assert data["ProductImage"] == [
            {
                "http": "http://homolog.test/public/uploads/polo.png",
                "https": "https://homolog.test/public/uploads/polo.png",
            }
        ]
        assert data["image"] == "1"
        assert len(data["Variant"]) == 2
        assert data["all_categories"] == [leaf.id, root.id]

    def test_without_variants(self, client, catalog):
        product = catalog.product()

        data = client.get(f"/api/products/{product.id}").json()["data"]["Product"]

        assert data["Properties"] == []
        assert data["ProductImage"] == []
        assert data["image"] == "0"
        assert data["all_categories"] == []

    def test_quantity_sold_counts_paid_lines(self, client, catalog):
        customer = catalog.customer()
        product = catalog.product()
        catalog.order(customer, product)
        catalog.order(customer, product, payment_status="unpaid")

        data = client.get(f"/api/products/{product.id}").json()["data"]["Product"]

        assert data["quantity_sold"] == 1

    def test_list_sort_modes(self, client, catalog, make_client):
        catalog.product("Caneca", unit_price=30)
        catalog.product("Bone", unit_price=50)
        catalog.product("Agenda", unit_price=10)
        params = {"sort": "unit_price", "order": "desc"}

        by_price = client.get("/api/products", params=params).json()["data"]
        legacy = make_client(listing=ListingConfig(legacy_id_sort=True))
        by_id = legacy.get("/api/products", params=params).json()["data"]

        assert [item["name"] for item in by_price["Products"]] == ["Bone", "Caneca", "Agenda"]
        assert [item["id"] for item in by_id["Products"]] == [3, 2, 1]
        assert by_price["paging"]["total"] == 3

    def test_sold(self, client, catalog):
        customer = catalog.customer()
        product = catalog.product()
        variant = catalog.variant(product, "Azul-M", sku="REF-1")
        order = catalog.order(customer, product)

        data = client.get(f"/api/products/{product.id}/sold").json()["data"]

        assert data["ProductsSolds"] == [
            {
                "ProductsSold": {
                    "product_id": product.id,
                    "order_id": order.id,
                    "name": "Camiseta",
                    "price": "100.00",
                    "quantity": 1,
                    "variation_id": variant.id,
                    "reference": "REF-1",
                }
            }
        ]


class TestProductUpdateDelete:
    """Partial updates and removal."""

    def test_partial_update(self, client, catalog, engine):
        category = catalog.category()
        product = catalog.product("Caneca", category=category, current_stock=4)

        response = client.put(
            f"/api/products/{product.id}",
            json={"Product": {"name": "Caneca Grande", "published": False}},
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Product Updated Successfully"
        with Session(engine) as session:
            row = session.get(ProductTable, product.id)
            assert row.name == "Caneca Grande"
            assert row.slug == "Caneca-Grande"
            assert row.published == 0
            assert row.current_stock == 4
            assert row.category_id == category.id

    def test_clearing_discount(self, client, catalog, engine):
        product = catalog.product(discount=10, discount_type="percent")

        client.put(f"/api/products/{product.id}", json={"Product": {"is_discounted": False}})

        with Session(engine) as session:
            row = session.get(ProductTable, product.id)
            assert row.discount == 0
            assert row.discount_type is None

    def test_update_unknown_category(self, client, catalog):
        product = catalog.product()

        response = client.put(f"/api/products/{product.id}", json={"Product": {"category_id": 9}})

        assert response.status_code == 400
        assert "category_id" in response.json()["errors"]

    def test_delete_removes_variants(self, client, catalog, engine):
        product = catalog.product()
        catalog.variant(product)

        response = client.delete(f"/api/products/{product.id}")

        assert response.json()["message"] == "Product deleted successfully"
        with Session(engine) as session:
            assert session.get(ProductTable, product.id) is None
            assert session.exec(select(ProductStockTable)).all() == []
