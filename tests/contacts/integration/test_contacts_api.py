"""Integration tests for Contacts API endpoints via TestClient."""

import pytest
from contacts.api import router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.api.errors import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


def _create(client, **overrides):
    payload = {"email": "karabo@example.co.za", "name": "Karabo", "source": "newsletter"}
    payload.update(overrides)
    response = client.post("/contacts", json=payload)
    assert response.status_code == 201
    return response.json()["contact_id"]


class TestContactEndpoints:
    def test_create_and_get(self, client):
        contact_id = _create(client)

        body = client.get(f"/contacts/{contact_id}").json()

        assert body["email"] == "karabo@example.co.za"
        assert body["source"] == "newsletter"
        assert body["subscribed"] is True

    def test_search_and_subscription_filter(self, client):
        _create(client)
        _create(client, email="lindiwe@example.co.za", name="Lindiwe", subscribed=False)

        found = client.get("/contacts", params={"search": "LINDI"}).json()
        assert [row["name"] for row in found] == ["Lindiwe"]

        unsubscribed = client.get("/contacts", params={"subscribed": False}).json()
        assert [row["email"] for row in unsubscribed] == ["lindiwe@example.co.za"]

    def test_invalid_email_is_400(self, client):
        response = client.post("/contacts", json={"email": "nobody"})
        assert response.status_code == 400
        assert "email" in response.json()["error"]

    def test_delete_and_404(self, client):
        contact_id = _create(client)

        assert client.delete(f"/contacts/{contact_id}").status_code == 200
        assert client.get(f"/contacts/{contact_id}").status_code == 404
