"""FastAPI endpoints for the Ordering domain.

Thin adapters: requests become commands (or a status update through the
fallback orchestrator), and every mutation answers with the re-read order.
"""

from fastapi import APIRouter, Body
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddressResponse,
    DailySalesResponse,
    NextStepResponse,
    OrderDetailResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderSummaryResponse,
    SetArchivedRequest,
    SetOrderStatusRequest,
    StatusUpdateResponse,
    TimelineStepResponse,
)
from ordering.order.archiving import SetOrderArchived
from ordering.order.normalization import normalize_order_payload
from ordering.order.order import Order
from ordering.order.queries import list_orders
from ordering.order.recording import record_command_from
from ordering.order.status_update import StatusUpdateResult, update_order_status
from ordering.order.workflow import OrderStatus
from ordering.projections.daily_sales import DailySales

order_router = APIRouter(prefix="/orders", tags=["orders"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


def _summary_fields(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "fulfillment_type": order.fulfillment_type,
        "status": order.status,
        "buyer_name": order.buyer_name,
        "buyer_email": order.buyer_email,
        "total_cents": order.total_cents,
        "item_count": order.item_count,
        "archived": bool(order.archived),
        "created_at": order.created_at,
    }


def order_detail(order: Order) -> OrderDetailResponse:
    step = order.next_step()
    address = None
    if order.address:
        address = AddressResponse(**order.address.as_payload(), display=order.rendered_address)

    return OrderDetailResponse(
        **_summary_fields(order),
        subtotal_cents=order.subtotal_cents,
        shipping_cents=order.shipping_cents,
        discount_cents=order.discount_cents,
        coupon_code=order.coupon_code,
        buyer_phone=order.buyer_phone,
        notes=order.notes,
        address=address,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                variant_index=item.variant_index,
                name=item.name,
                quantity=item.quantity,
                unit_price_cents=item.unit_price_cents,
                line_total_cents=item.line_total_cents,
            )
            for item in order.sorted_items
        ],
        timeline=[
            TimelineStepResponse(status=row.status.value, state=row.state.value, reached_at=row.reached_at)
            for row in order.timeline()
        ],
        next_step=NextStepResponse(label=step.label, status=step.status.value) if step else None,
        paid_at=order.paid_at,
        order_packed_at=order.order_packed_at,
        order_out_for_delivery_at=order.order_out_for_delivery_at,
        order_delivered_at=order.order_delivered_at,
        order_collected_at=order.order_collected_at,
        fulfilled_at=order.fulfilled_at,
        cancelled_at=order.cancelled_at,
        updated_at=order.updated_at,
    )


def _status_update_response(result: StatusUpdateResult) -> StatusUpdateResponse:
    return StatusUpdateResponse(
        path=result.path.value,
        fallback_reason="; ".join(str(failure) for failure in result.failures) or None,
        notification_error=result.notification_error,
        order=order_detail(result.order),
    )


# --- Queries ---


@order_router.get("", response_model=list[OrderSummaryResponse])
async def get_orders(
    status: str | None = None,
    fulfillment_type: str | None = None,
    search: str | None = None,
    archived: bool | None = False,
) -> list[OrderSummaryResponse]:
    orders = list_orders(status=status, fulfillment_type=fulfillment_type, archived=archived, search=search)
    return [OrderSummaryResponse(**_summary_fields(order)) for order in orders]


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return order_detail(order)


# --- Commands ---


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def record_order(payload: dict = Body(...)) -> OrderIdResponse:
    command = record_command_from(normalize_order_payload(payload))
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.put("/{order_id}/status", response_model=StatusUpdateResponse)
async def set_order_status(order_id: str, body: SetOrderStatusRequest) -> StatusUpdateResponse:
    return _status_update_response(update_order_status(order_id, body.status))


@order_router.put("/{order_id}/advance", response_model=StatusUpdateResponse)
async def advance_order(order_id: str) -> StatusUpdateResponse:
    order = current_domain.repository_for(Order).get(order_id)
    step = order.next_step()
    if step is None:
        raise ValidationError({"status": [f"Order is {order.status}; there is no next step"]})
    return _status_update_response(update_order_status(order_id, step.status.value))


@order_router.put("/{order_id}/cancel", response_model=StatusUpdateResponse)
async def cancel_order(order_id: str) -> StatusUpdateResponse:
    return _status_update_response(update_order_status(order_id, OrderStatus.CANCELLED.value))


@order_router.put("/{order_id}/archive", response_model=OrderDetailResponse)
async def set_order_archived(order_id: str, body: SetArchivedRequest) -> OrderDetailResponse:
    current_domain.process(SetOrderArchived(order_id=order_id, archived=body.archived), asynchronous=False)
    return order_detail(current_domain.repository_for(Order).get(order_id))


# --- Analytics ---


@analytics_router.get("/daily-sales", response_model=list[DailySalesResponse])
async def get_daily_sales(start: str | None = None, end: str | None = None) -> list[DailySalesResponse]:
    """Daily sales rows, oldest first; ``start``/``end`` are inclusive YYYY-MM-DD bounds."""
    rows = current_domain.repository_for(DailySales)._dao.query.limit(None).all().items
    rows = [row for row in rows if (not start or row.date >= start) and (not end or row.date <= end)]
    return [
        DailySalesResponse(
            date=row.date,
            orders_recorded=row.orders_recorded or 0,
            orders_paid=row.orders_paid or 0,
            orders_cancelled=row.orders_cancelled or 0,
            revenue_cents=row.revenue_cents or 0,
        )
        for row in sorted(rows, key=lambda row: row.date)
    ]
