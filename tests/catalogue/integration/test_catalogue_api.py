"""Integration tests for Catalogue API endpoints via TestClient."""

import pytest
from catalogue.api.routes import bundle_router, movement_router, product_router
from catalogue.product.product import Product
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from shared.api.errors import register_exception_handlers
from shared.settings import AdminSettings


@pytest.fixture()
def settings():
    return AdminSettings(low_stock_threshold=5, allow_negative_stock=False)


@pytest.fixture()
def client(settings):
    app = FastAPI()
    app.state.settings = settings
    app.include_router(product_router)
    app.include_router(bundle_router)
    app.include_router(movement_router)
    register_exception_handlers(app)
    return TestClient(app)


def _create_product(client, **overrides):
    payload = {"name": "Brow Pomade", "price_cents": 17900, "stock_qty": 8, "category": "brows"}
    payload.update(overrides)
    response = client.post("/products", json=payload)
    assert response.status_code == 201
    return response.json()["product_id"]


class TestProductEndpoints:
    def test_create_and_get(self, client):
        product_id = _create_product(client)

        response = client.get(f"/products/{product_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["price_display"] == "R 179.00"
        assert body["low_stock"] is False
        assert body["status"] == "draft"

    def test_invalid_product_is_400(self, client):
        response = client.post("/products", json={"name": "Freebie", "price_cents": 0})
        assert response.status_code == 400

    def test_unknown_product_is_404(self, client):
        assert client.get("/products/unknown").status_code == 404

    def test_list_filters_by_category(self, client):
        product_id = _create_product(client, category="nails")
        listed = [row["product_id"] for row in client.get("/products", params={"category": "nails"}).json()]
        assert product_id in listed

    def test_activate_without_image_is_400(self, client):
        product_id = _create_product(client)
        response = client.put(f"/products/{product_id}/activate")
        assert response.status_code == 400
        assert "image_urls" in response.json()["error"]

    def test_delete(self, client):
        product_id = _create_product(client)
        response = client.delete(f"/products/{product_id}")
        assert response.json() == {"action": "deleted"}


class TestStockEndpoints:
    def test_adjust_stock_reports_low_stock(self, client):
        product_id = _create_product(client)

        response = client.post(f"/products/{product_id}/stock", json={"delta": -4, "reason": "manual_damage"})

        assert response.status_code == 200
        body = response.json()
        assert body["movement_id"]
        assert body["product"]["stock_qty"] == 4
        assert body["product"]["low_stock"] is True

    def test_negative_stock_follows_settings(self, client, settings):
        product_id = _create_product(client)

        rejected = client.post(f"/products/{product_id}/stock", json={"delta": -10, "reason": "manual_correction"})
        assert rejected.status_code == 400

        settings.allow_negative_stock = True
        allowed = client.post(f"/products/{product_id}/stock", json={"delta": -10, "reason": "manual_correction"})
        assert allowed.json()["product"]["stock_qty"] == -2

    def test_movement_listing(self, client):
        product_id = _create_product(client)
        client.post(f"/products/{product_id}/stock", json={"delta": 3, "reason": "manual_restock"})

        rows = client.get("/stock-movements", params={"filter": "manual", "product_id": product_id}).json()

        assert [(row["stock_before"], row["stock_after"]) for row in rows] == [(8, 11)]

    def test_bad_movement_filter_is_400(self, client):
        assert client.get("/stock-movements", params={"filter": "sideways"}).status_code == 400


class TestPriceUpdateEndpoint:
    def test_preview_then_apply(self, client):
        product_id = _create_product(client)
        body = {"product_ids": [product_id], "adjustment_type": "percent", "value": 10, "preview": True}

        preview = client.post("/products/price-updates", json=body).json()
        assert preview["preview"] is True
        assert preview["changes"][0]["new_price_cents"] == 19690
        assert current_domain.repository_for(Product).get(product_id).price_cents == 17900

        client.post("/products/price-updates", json={**body, "preview": False})
        assert current_domain.repository_for(Product).get(product_id).price_cents == 19690


class TestBundleEndpoints:
    def test_create_and_delete_bundle(self, client):
        product_id = _create_product(client)

        created = client.post(
            "/bundles",
            json={"name": "Brow Kit", "price_cents": 29900, "items": [{"product_id": product_id, "quantity": 2}]},
        )
        assert created.status_code == 201
        bundle_id = created.json()["bundle_id"]

        bundle = client.get(f"/bundles/{bundle_id}").json()
        assert bundle["items"][0]["quantity"] == 2

        assert client.delete(f"/bundles/{bundle_id}").json() == {"action": "deleted"}
