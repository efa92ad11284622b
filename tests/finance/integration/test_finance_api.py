"""Integration tests for Finance API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from finance.api import router
from shared.api.errors import register_exception_handlers
from shared.utils.dates import store_today


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


class TestOperatingCostEndpoints:
    def test_record_list_and_delete(self, client):
        response = client.post(
            "/finance/operating-costs",
            json={"occurred_on": "2026-03-02", "category": "courier", "amount_cents": 150000},
        )
        assert response.status_code == 201
        cost_id = response.json()["cost_id"]

        rows = client.get("/finance/operating-costs").json()
        assert [(row["cost_id"], row["occurred_on"]) for row in rows] == [(cost_id, "2026-03-02")]

        assert client.delete(f"/finance/operating-costs/{cost_id}").status_code == 200
        assert client.get("/finance/operating-costs").json() == []

    def test_zero_amount_is_422(self, client):
        response = client.post("/finance/operating-costs", json={"category": "rent", "amount_cents": 0})
        assert response.status_code == 422

    def test_delete_unknown_is_404(self, client):
        assert client.delete("/finance/operating-costs/missing").status_code == 404


class TestReportEndpoints:
    def test_stats(self, client):
        client.post("/finance/operating-costs", json={"category": "rent", "amount_cents": 800000})

        body = client.get("/finance/stats").json()

        assert body["date_to"] == store_today()
        assert body["expenses_cents"] == 800000
        assert body["profit_cents"] == -800000
        assert [row["category"] for row in body["recent_expenses"]] == ["rent"]

    def test_daily_with_bad_date_is_400(self, client):
        response = client.get("/finance/daily", params={"date": "yesterday"})
        assert response.status_code == 400
        assert "date" in response.json()["error"]
