"""Customer and customer address endpoints end to end."""

import pytest
from sqlmodel import Session, select

from src.storefront.core.security import verify_password
from src.storefront.entities.catalog.customer import AddressTable, UserTable
from tests.fixtures.catalog import OTHER_VALID_CPF, VALID_CPF

pytestmark = pytest.mark.integration


def customer_body(**fields) -> dict:
    data = {
        "name": "Joana Souza",
        "email": "joana@example.com",
        "cpf": VALID_CPF,
        "phone": "(19) 99999-0000",
        "CustomerAddress": [
            {
                "address": "Av. Brasil, 100",
                "country": "Brasil",
                "state": "Sao Paulo",
                "city": "Campinas",
                "zip_code": "13000-100",
                "default_address": True,
            }
        ],
    }
    data.update(fields)
    return data


@pytest.fixture
def location(catalog):
    return catalog.location()


class TestCustomerCreate:
    """Creating customers with their addresses."""

    def test_create(self, client, location, engine):
        country, state, city = location

        response = client.post("/api/customers", json=customer_body())

        assert response.status_code == 201
        assert response.json()["message"] == "User Created Successfully"
        user_id = response.json()["user_id"]
        with Session(engine) as session:
            user = session.get(UserTable, user_id)
            assert user.user_type == "customer"
            assert user.cpf == "52998224725"
            assert user.phone == "19999990000"
            assert verify_password("529982", user.password)
            address = session.exec(select(AddressTable)).one()
            assert address.user_id == user_id
            assert (address.country_id, address.state_id, address.city_id) == (
                country.id,
                state.id,
                city.id,
            )
            assert address.postal_code == "13000100"
            assert address.set_default == 1

    def test_explicit_password(self, client, location, engine):
        response = client.post("/api/customers", json=customer_body(password="s3cret!"))

        with Session(engine) as session:
            user = session.get(UserTable, response.json()["user_id"])
            assert verify_password("s3cret!", user.password)
            assert not verify_password("529982", user.password)

    def test_duplicate_email(self, client, catalog, location):
        catalog.customer(email="joana@example.com", cpf="11144477735")

        response = client.post("/api/customers", json=customer_body(email="JOANA@example.com"))

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "status": 409,
            "message": "There is already a record with the given email.",
        }

    def test_duplicate_cpf(self, client, catalog, location):
        catalog.customer(email="other@example.com", cpf="52998224725")

        response = client.post("/api/customers", json=customer_body())

        assert response.status_code == 409
        assert response.json()["message"] == "There is already a record with the given cpf."

    def test_invalid_cpf(self, client, location):
        response = client.post("/api/customers", json=customer_body(cpf="123.456.789-00"))

        assert response.status_code == 400
        assert "cpf" in response.json()["errors"]

    def test_unknown_city(self, client, location):
        body = customer_body()
        body["CustomerAddress"][0]["city"] = "Atlantida"

        response = client.post("/api/customers", json=body)

        assert response.status_code == 400
        assert response.json()["errors"] == {
            "CustomerAddress.0.city": ["There is no data for the given city: Atlantida"]
        }

    def test_missing_address_field(self, client, location):
        body = customer_body()
        del body["CustomerAddress"][0]["zip_code"]

        response = client.post("/api/customers", json=body)

        assert response.status_code == 400
        assert "CustomerAddress.0.zip_code" in response.json()["errors"]


@pytest.fixture
def customer(catalog, location):
    country, state, city = location
    user = catalog.customer()
    address = catalog.address(
        user, country_id=country.id, state_id=state.id, city_id=city.id
    )
    return user, address


class TestCustomerRead:
    """Customer views."""

    def test_show(self, client, catalog, customer):
        user, address = customer
        catalog.order(user, catalog.product())
        catalog.order(user, catalog.product("Caneca"), payment_status="unpaid")

        data = client.get(f"/api/customers/{user.id}").json()["data"]["Customer"]

        assert data["name"] == "Maria Silva"
        assert data["email"] == "maria@example.com"
        assert data["country"] == "Brasil"
        assert data["state"] == "Sao Paulo"
        assert data["city"] == "Campinas"
        assert data["CustomerAddress"] == {"id": address.id}
        assert data["total_orders"] == 1
        assert data["last_purchase"] == "2024-05-01"
        assert data["address"] == "Rua das Flores, 10"
        assert data["zip_code"] == "13000000"

    def test_admins_are_not_customers(self, client, catalog):
        admin = catalog.admin()

        assert client.get(f"/api/customers/{admin.id}").json()["status"] == 404

    def test_list(self, client, catalog, customer):
        catalog.admin()

        data = client.get("/api/customers").json()["data"]

        assert data["paging"]["total"] == 1
        item = data["Customers"][0]["Customer"]
        assert item["name"] == "Maria Silva"
        assert item["country"] == "Brasil"

    def test_addresses(self, client, customer):
        user, address = customer

        listed = client.get("/api/customers/addresses").json()["data"]["CustomerAddresses"]
        shown = client.get(f"/api/customers/addresses/{address.id}").json()["data"]

        assert [item["CustomerAddress"]["id"] for item in listed] == [address.id]
        assert shown["CustomerAddress"]["user_id"] == user.id
        assert shown["CustomerAddress"]["country"] == "Brasil"
        assert shown["CustomerAddress"]["zip_code"] == "13000000"
        assert shown["CustomerAddress"]["default_address"] is True

    def test_address_not_found(self, client):
        assert client.get("/api/customers/addresses/9").json()["status"] == 404


class TestCustomerUpdateDelete:
    """Customer updates and removal."""

    def test_update(self, client, customer, engine):
        user, address = customer

        response = client.put(
            f"/api/customers/{user.id}",
            json={
                "name": "Maria S.",
                "password": "nova-senha",
                "CustomerAddress": [
                    {"id": address.id, "zip_code": "13000-999", "latitude": -22.9}
                ],
            },
        )

        assert response.status_code == 201
        assert response.json()["message"] == "User Updated Successfully"
        with Session(engine) as session:
            stored = session.get(UserTable, user.id)
            assert stored.name == "Maria S."
            assert stored.email == "maria@example.com"
            assert verify_password("nova-senha", stored.password)
            stored_address = session.get(AddressTable, address.id)
            assert stored_address.postal_code == "13000999"
            assert stored_address.latitude == -22.9
            assert stored_address.city_id == address.city_id

    def test_unknown_address_id(self, client, customer):
        user, _ = customer

        response = client.put(
            f"/api/customers/{user.id}", json={"CustomerAddress": [{"id": 999}]}
        )

        assert response.status_code == 400
        assert list(response.json()["errors"]) == ["CustomerAddress.0.id"]

    def test_cpf_taken_by_another_customer(self, client, catalog, customer):
        user, _ = customer
        catalog.customer(email="other@example.com", cpf="11144477735")

        response = client.put(f"/api/customers/{user.id}", json={"cpf": OTHER_VALID_CPF})

        assert response.status_code == 409

    def test_delete_removes_addresses(self, client, customer, engine):
        user, _ = customer

        response = client.delete(f"/api/customers/{user.id}")

        assert response.json()["message"] == "User deleted successfully"
        with Session(engine) as session:
            assert session.get(UserTable, user.id) is None
            assert session.exec(select(AddressTable)).all() == []
