"""Tests for the OperatingCost aggregate and the finance summary arithmetic."""

from datetime import date

import pytest
from finance.cost.operating_cost import OperatingCost, OperatingCostRecorded
from finance.ledger.reports import FinanceSummary, parse_day
from protean.exceptions import ValidationError


class TestOperatingCost:
    def test_record_raises_event(self):
        cost = OperatingCost.record(date(2026, 3, 2), "courier", 150000, description="Top-up")

        event = cost._events[-1]
        assert isinstance(event, OperatingCostRecorded)
        assert event.amount_cents == 150000
        assert event.occurred_on == date(2026, 3, 2)

    @pytest.mark.parametrize("amount", [0, -500])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(ValidationError) as exc:
            OperatingCost.record(date(2026, 3, 2), "rent", amount)
        assert "amount_cents" in exc.value.messages


class TestFinanceSummary:
    def test_profit_subtracts_goods_and_expenses(self):
        summary = FinanceSummary(
            date_from="2026-03-01",
            date_to="2026-03-30",
            orders_paid=3,
            revenue_cents=100000,
            cogs_cents=40000,
            expenses_cents=25000,
        )
        assert summary.gross_profit_cents == 60000
        assert summary.profit_cents == 35000

    def test_parse_day(self):
        assert parse_day("2026-03-02") == date(2026, 3, 2)
        with pytest.raises(ValidationError) as exc:
            parse_day("02/03/2026", "date_from")
        assert "date_from" in exc.value.messages
