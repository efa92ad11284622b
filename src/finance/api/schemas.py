"""Pydantic request/response schemas for the Finance API."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class RecordOperatingCostRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "occurred_on": "2026-03-02",
                    "category": "courier",
                    "description": "Courier account top-up",
                    "amount_cents": 150000,
                }
            ]
        }
    }

    occurred_on: date | None = None
    category: str = Field(..., max_length=100)
    description: str | None = None
    amount_cents: int = Field(..., ge=1)


class CostIdResponse(BaseModel):
    cost_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OperatingCostResponse(BaseModel):
    cost_id: str
    occurred_on: date
    category: str
    description: str | None = None
    amount_cents: int
    created_at: datetime | None = None


class FinanceSummaryResponse(BaseModel):
    date_from: str
    date_to: str
    orders_paid: int
    revenue_cents: int
    cogs_cents: int
    expenses_cents: int
    gross_profit_cents: int
    profit_cents: int
    recent_expenses: list[OperatingCostResponse]
