"""FastAPI endpoints for the Finance domain."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from finance.api.schemas import (
    CostIdResponse,
    FinanceSummaryResponse,
    OperatingCostResponse,
    RecordOperatingCostRequest,
    StatusResponse,
)
from finance.cost.management import DeleteOperatingCost, RecordOperatingCost
from finance.cost.operating_cost import OperatingCost
from finance.ledger.reports import DEFAULT_WINDOW_DAYS, FinanceSummary, daily_finance, finance_stats, list_costs

router = APIRouter(prefix="/finance", tags=["finance"])


def _cost_response(cost: OperatingCost) -> OperatingCostResponse:
    return OperatingCostResponse(
        cost_id=str(cost.id),
        occurred_on=cost.occurred_on,
        category=cost.category,
        description=cost.description,
        amount_cents=cost.amount_cents,
        created_at=cost.created_at,
    )


def _summary_response(summary: FinanceSummary) -> FinanceSummaryResponse:
    return FinanceSummaryResponse(
        date_from=summary.date_from,
        date_to=summary.date_to,
        orders_paid=summary.orders_paid,
        revenue_cents=summary.revenue_cents,
        cogs_cents=summary.cogs_cents,
        expenses_cents=summary.expenses_cents,
        gross_profit_cents=summary.gross_profit_cents,
        profit_cents=summary.profit_cents,
        recent_expenses=[_cost_response(cost) for cost in summary.recent_expenses],
    )


@router.get("/stats", response_model=FinanceSummaryResponse)
async def get_finance_stats(days: int = DEFAULT_WINDOW_DAYS) -> FinanceSummaryResponse:
    return _summary_response(finance_stats(days))


@router.get("/daily", response_model=FinanceSummaryResponse)
async def get_daily_finance(date: str | None = None) -> FinanceSummaryResponse:
    return _summary_response(daily_finance(date))


@router.get("/operating-costs", response_model=list[OperatingCostResponse])
async def get_operating_costs(
    date_from: str | None = None,
    date_to: str | None = None,
    category: str | None = None,
) -> list[OperatingCostResponse]:
    return [_cost_response(cost) for cost in list_costs(date_from, date_to, category)]


@router.post("/operating-costs", status_code=201, response_model=CostIdResponse)
async def record_operating_cost(body: RecordOperatingCostRequest) -> CostIdResponse:
    command = RecordOperatingCost(
        occurred_on=body.occurred_on,
        category=body.category,
        description=body.description,
        amount_cents=body.amount_cents,
    )
    result = current_domain.process(command, asynchronous=False)
    return CostIdResponse(cost_id=result)


@router.delete("/operating-costs/{cost_id}", response_model=StatusResponse)
async def delete_operating_cost(cost_id: str) -> StatusResponse:
    current_domain.process(DeleteOperatingCost(cost_id=cost_id), asynchronous=False)
    return StatusResponse()
