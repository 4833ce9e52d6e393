"""Upstream proxy endpoints under /api/enjoy."""

import httpx
import pytest

pytestmark = pytest.mark.integration


class TestProductProxy:
    """Product calls are mapped onto the upstream product API."""

    def test_list(self, client, upstream):
        upstream.body = {"data": [{"id": 1}]}

        response = client.get("/api/enjoy/products")

        assert response.status_code == 200
        assert response.json() == {"data": [{"id": 1}]}
        assert upstream.last.method == "GET"
        assert str(upstream.last.url) == "https://upstream.test/api/products"

    def test_create_maps_fields(self, client, upstream):
        body = {
            "Product": {
                "name": "Caneca",
                "category_id": 3,
                "brand": "Acme",
                "weight": 0.4,
                "price": 29.9,
                "description": "Caneca de porcelana",
                "stock": 15,
            }
        }

        client.post("/api/enjoy/products", json=body)

        assert str(upstream.last.url) == "https://upstream.test/api/product"
        assert upstream.last_json() == {
            "added_by": "pdv",
            "name": "Caneca",
            "slug": "Caneca",
            "category_id": 3,
            "brand_name": "Acme",
            "weight": 0.4,
            "unit_price": 29.9,
            "description": "Caneca de porcelana",
            "current_stock": 15,
        }

    def test_update_sends_only_given_fields(self, client, upstream):
        client.put("/api/enjoy/products/8", json={"Product": {"price": 10}})

        assert upstream.last.method == "PUT"
        assert str(upstream.last.url) == "https://upstream.test/api/product/8"
        assert upstream.last_json() == {"added_by": "pdv", "unit_price": 10}

    def test_show_and_delete(self, client, upstream):
        client.get("/api/enjoy/products/8")
        client.delete("/api/enjoy/products/8")

        assert [(call.method, call.url.path) for call in upstream.calls] == [
            ("GET", "/api/product/8"),
            ("DELETE", "/api/product/8"),
        ]

    def test_upstream_status_is_relayed(self, client, upstream):
        upstream.status_code = 422
        upstream.body = {"errors": {"name": ["required"]}}

        response = client.post("/api/enjoy/products", json={"Product": {}})

        assert response.status_code == 422
        assert response.json() == {"errors": {"name": ["required"]}}

    def test_upstream_unreachable(self, client, upstream):
        upstream.error = httpx.ConnectError("connection refused")

        response = client.get("/api/enjoy/products")

        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "status": 502,
            "message": "Upstream service unavailable",
        }


class TestClientProxy:
    """Customer calls go to the upstream client API."""

    def test_paths(self, client, upstream):
        client.get("/api/enjoy/clients")
        client.get("/api/enjoy/clients/4")
        client.delete("/api/enjoy/clients/4")

        assert [(call.method, call.url.path) for call in upstream.calls] == [
            ("GET", "/api/clients"),
            ("GET", "/api/client/4"),
            ("DELETE", "/api/client/4"),
        ]

    def test_create(self, client, upstream):
        body = {"Customer": {"name": "Ana", "email": "ana@example.com", "city": "Campinas"}}

        client.post("/api/enjoy/clients", json=body)

        assert upstream.last.url.path == "/api/client"
        assert upstream.last_json() == {
            "name": "Ana",
            "email": "ana@example.com",
            "city": "Campinas",
        }

    def test_update(self, client, upstream):
        client.put("/api/enjoy/clients/4", json={"Customer": {"phone": "1999990000"}})

        assert upstream.last.method == "PUT"
        assert upstream.last.url.path == "/api/client/4"
        assert upstream.last_json() == {"phone": "1999990000"}


class TestOrderProxy:
    """Order calls go to the upstream order API."""

    def test_create_maps_fields(self, client, upstream):
        body = {
            "Order": {
                "Customer": {"id": 4},
                "payment_form": "pix",
                "shipment_value": 12.5,
            }
        }

        client.post("/api/enjoy/orders", json=body)

        assert upstream.last.url.path == "/api/order"
        assert upstream.last_json() == {
            "customer": {"id": 4},
            "payment_type": "pix",
            "shipment_value": 12.5,
        }

    def test_paths(self, client, upstream):
        client.get("/api/enjoy/orders")
        client.get("/api/enjoy/orders/2")
        client.put("/api/enjoy/orders/2", json={"Order": {"payment_form": "boleto"}})
        client.delete("/api/enjoy/orders/2")

        assert [(call.method, call.url.path) for call in upstream.calls] == [
            ("GET", "/api/orders"),
            ("GET", "/api/order/2"),
            ("PUT", "/api/order/2"),
            ("DELETE", "/api/order/2"),
        ]

    def test_empty_upstream_body(self, client, upstream):
        upstream.status_code = 204
        upstream.body = None

        response = client.delete("/api/enjoy/orders/2")

        assert response.status_code == 204
        assert response.content == b""
