"""Integration tests for the product endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from caviar.catalogue.api import product_router
from caviar.shared.http import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(product_router)
    return TestClient(app)


def _payload(**overrides):
    payload = {
        "slug": "beluga-classic",
        "name": "Beluga Classic",
        "subtitle": "Huso huso",
        "variants": [{"mass": 50, "stock": 10, "prices": {"EU": {"amount": 12000, "currency": "EUR"}}}],
        "details": {
            "fish_age": "20 years",
            "grain_size": "3.5mm",
            "color": "light grey",
            "taste": "creamy",
            "texture": "soft",
            "shelf_life_duration": "8 weeks",
            "min_temp_c": -4,
            "max_temp_c": 2,
        },
    }
    payload.update(overrides)
    return payload


def _create(client, **overrides):
    response = client.post("/products", json=_payload(**overrides))
    assert response.status_code == 201
    return response.json()["product_id"]


class TestCreateProduct:
    def test_create(self, client):
        product_id = _create(client)

        response = client.get(f"/products/{product_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["slug"] == "beluga-classic"
        assert body["is_active"] is False
        assert body["variants"][0]["prices"]["EU"] == {"amount": 12000, "currency": "EUR"}

    def test_invalid_slug(self, client):
        response = client.post("/products", json=_payload(slug="Bad Slug"))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    def test_duplicate_slug(self, client):
        _create(client)
        response = client.post("/products", json=_payload())
        assert response.status_code == 400
        assert "already exists" in response.json()["error"]["message"]


class TestReadProducts:
    def test_get_missing(self, client):
        response = client.get("/products/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "NOT_FOUND", "message": "product does-not-exist not found"}
        }

    def test_get_by_slug(self, client):
        product_id = _create(client)
        response = client.get("/products/slug/beluga-classic")
        assert response.status_code == 200
        assert response.json()["id"] == product_id

    def test_list_only_active_by_default(self, client):
        product_id = _create(client)
        _create(client, slug="osetra-royal", name="Osetra Royal")
        client.patch(f"/products/{product_id}", json={"is_active": True})

        response = client.get("/products")
        assert response.status_code == 200
        assert [p["slug"] for p in response.json()["products"]] == ["beluga-classic"]

        response = client.get("/products", params={"show_all": True})
        assert response.json()["count"] == 2


class TestUpdateAndDelete:
    def test_patch(self, client):
        product_id = _create(client)
        response = client.patch(f"/products/{product_id}", json={"name": "Beluga Reserve"})
        assert response.status_code == 200

        assert client.get(f"/products/{product_id}").json()["name"] == "Beluga Reserve"

    def test_delete(self, client):
        product_id = _create(client)
        assert client.delete(f"/products/{product_id}").status_code == 200
        assert client.get(f"/products/{product_id}").status_code == 404
