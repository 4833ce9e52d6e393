"""Color endpoints end to end."""

import pytest

from src.storefront.runtime.config.config_data import ListingConfig

pytestmark = pytest.mark.integration


def create(client, name: str, code: str, **fields):
    return client.post("/api/colors", json={"Color": {"name": name, "code": code, **fields}})


class TestColorLifecycle:
    """Create, read, update and delete a color."""

    def test_crud(self, client):
        response = create(client, "Azul Claro", "#ADD8E6", display_name="Azul claro")
        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "code": 201,
            "status": True,
            "message": "Color Created Successfully",
            "color_id": 1,
        }

        shown = client.get("/api/colors/1").json()
        assert shown == {
            "success": True,
            "status": 200,
            "data": {
                "Color": {
                    "id": 1,
                    "name": "AzulClaro",
                    "code": "#ADD8E6",
                    "display_name": "Azul claro",
                }
            },
        }

        response = client.put("/api/colors/1", json={"Color": {"code": "#87CEFA"}})
        assert response.status_code == 201
        assert response.json()["message"] == "Color Updated Successfully"
        assert response.json()["color_id"] == 1
        color = client.get("/api/colors/1").json()["data"]["Color"]
        assert color["code"] == "#87CEFA"
        assert color["name"] == "AzulClaro"

        response = client.delete("/api/colors/1")
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": 204,
            "message": "Color deleted successfully",
        }
        assert client.get("/api/colors/1").json()["status"] == 404

    def test_create_alias_route(self, client):
        response = client.post(
            "/api/colors/create", json={"Color": {"name": "Preto", "code": "#000"}}
        )

        assert response.status_code == 201
        assert response.json()["color_id"] == 1

    def test_duplicate_code(self, client):
        create(client, "Azul", "#0000FF")

        response = create(client, "Outro", "#0000FF")

        assert response.status_code == 400
        assert response.json()["errors"] == {
            "code": ["There is already a record with the given code: #0000FF"]
        }

    def test_update_keeps_own_code(self, client):
        create(client, "Azul", "#0000FF")

        response = client.put(
            "/api/colors/1", json={"Color": {"name": "Azul Royal", "code": "#0000FF"}}
        )

        assert response.status_code == 201
        assert client.get("/api/colors/1").json()["data"]["Color"]["name"] == "AzulRoyal"

    def test_update_to_taken_code(self, client):
        create(client, "Azul", "#0000FF")
        create(client, "Preto", "#000000")

        response = client.put("/api/colors/2", json={"Color": {"code": "#0000FF"}})

        assert response.status_code == 400
        assert "code" in response.json()["errors"]


class TestColorListing:
    """Sort and pagination of the color list."""

    @pytest.fixture
    def seeded(self, client):
        for name, code in [("Verde", "#0F0"), ("Azul", "#00F"), ("Preto", "#000")]:
            create(client, name, code)
        return client

    def test_paged(self, seeded):
        data = seeded.get("/api/colors").json()["data"]

        assert data["sort"] == {"field": "id", "direction": "asc"}
        assert data["fieldsAvailableSortBy"] == ["id", "name", "code", "created_at", "updated_at"]
        assert data["paging"] == {"total": 3, "page": 1, "limit": 10, "lastPage": 1}
        assert [item["Color"]["name"] for item in data["Colors"]] == ["Verde", "Azul", "Preto"]

    def test_flat(self, seeded):
        data = seeded.get("/api/colors", params={"limit": 2, "offset": 1}).json()["data"]

        assert "paging" not in data
        assert [item["Color"]["name"] for item in data["Colors"]] == ["Azul", "Preto"]

    def test_sort_by_requested_field(self, seeded):
        data = seeded.get("/api/colors", params={"sort": "name", "order": "desc"}).json()["data"]

        assert data["sort"] == {"field": "name", "direction": "desc"}
        assert [item["Color"]["name"] for item in data["Colors"]] == ["Verde", "Preto", "Azul"]

    def test_legacy_sort_by_id(self, seeded, make_client):
        legacy = make_client(listing=ListingConfig(legacy_id_sort=True))

        data = legacy.get("/api/colors", params={"sort": "name", "order": "desc"}).json()["data"]

        assert data["sort"] == {"field": "name", "direction": "desc"}
        assert [item["Color"]["id"] for item in data["Colors"]] == [3, 2, 1]

    def test_malformed_parameters_fall_back(self, seeded):
        params = {"limit": "abc", "order": "sideways", "page": "-1"}
        data = seeded.get("/api/colors", params=params).json()["data"]

        assert data["sort"]["direction"] == "sideways"
        assert [item["Color"]["id"] for item in data["Colors"]] == [1, 2, 3]
        assert data["paging"]["page"] == 1
        assert len(data["Colors"]) == 3

    def test_page_size_from_configuration(self, seeded, make_client):
        small = make_client(listing=ListingConfig(page_size=2))

        data = small.get("/api/colors", params={"page": 2}).json()["data"]

        assert data["paging"] == {"total": 3, "page": 2, "limit": 2, "lastPage": 2}
        assert [item["Color"]["name"] for item in data["Colors"]] == ["Preto"]

    def test_empty(self, client):
        data = client.get("/api/colors").json()["data"]

        assert data["Colors"] == []
        assert data["paging"]["lastPage"] == 1
