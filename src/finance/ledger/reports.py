"""Finance read side: one day's figures and a rolling summary.

Profit is revenue less cost of goods less operating costs.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from shared.utils.dates import store_today

from finance.cost.operating_cost import OperatingCost
from finance.ledger.projections import DailyFinance

DEFAULT_WINDOW_DAYS = 30
RECENT_EXPENSES = 5


def parse_day(value: str, field_name: str = "date") -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError({field_name: [f"Expected a YYYY-MM-DD date, got {value!r}"]}) from None


@dataclass(frozen=True)
class FinanceSummary:
    date_from: str
    date_to: str
    orders_paid: int
    revenue_cents: int
    cogs_cents: int
    expenses_cents: int
    recent_expenses: list = field(default_factory=list)

    @property
    def gross_profit_cents(self) -> int:
        return self.revenue_cents - self.cogs_cents

    @property
    def profit_cents(self) -> int:
        return self.gross_profit_cents - self.expenses_cents


def list_costs(date_from: str | None = None, date_to: str | None = None, category: str | None = None) -> list:
    """Operating costs, newest first; bounds are inclusive ``YYYY-MM-DD`` days."""
    costs = current_domain.repository_for(OperatingCost)._dao.query.limit(None).all().items
    if date_from:
        costs = [cost for cost in costs if cost.occurred_on >= parse_day(date_from, "date_from")]
    if date_to:
        costs = [cost for cost in costs if cost.occurred_on <= parse_day(date_to, "date_to")]
    if category:
        needle = category.strip().lower()
        costs = [cost for cost in costs if cost.category.lower() == needle]
    return sorted(costs, key=lambda cost: (cost.occurred_on, cost.created_at), reverse=True)


def summarise(date_from: str, date_to: str) -> FinanceSummary:
    rows = current_domain.repository_for(DailyFinance)._dao.query.limit(None).all().items
    rows = [row for row in rows if date_from <= row.date <= date_to]
    costs = list_costs(date_from, date_to)
    return FinanceSummary(
        date_from=date_from,
        date_to=date_to,
        orders_paid=sum(row.orders_paid or 0 for row in rows),
        revenue_cents=sum(row.revenue_cents or 0 for row in rows),
        cogs_cents=sum(row.cogs_cents or 0 for row in rows),
        expenses_cents=sum(cost.amount_cents for cost in costs),
        recent_expenses=costs[:RECENT_EXPENSES],
    )


def daily_finance(day: str | None = None) -> FinanceSummary:
    day = parse_day(day).isoformat() if day else store_today()
    return summarise(day, day)


def finance_stats(days: int = DEFAULT_WINDOW_DAYS) -> FinanceSummary:
    """The last ``days`` store-local days, today included."""
    if days < 1:
        raise ValidationError({"days": ["Window must cover at least one day"]})
    today = date.fromisoformat(store_today())
    return summarise((today - timedelta(days=days - 1)).isoformat(), today.isoformat())
