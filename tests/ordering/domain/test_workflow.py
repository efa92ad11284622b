"""Tests for the fulfillment workflow lookups."""

import pytest
from ordering.order.workflow import (
    FulfillmentType,
    OrderStatus,
    StepState,
    allowed_targets,
    build_timeline,
    coerce_status,
    next_step,
    step_status,
)
from protean.exceptions import ValidationError


class TestNextStep:
    @pytest.mark.parametrize("status", ["created", "unpaid"])
    def test_unpaid_orders_are_offered_mark_as_paid(self, status):
        step = next_step("delivery", status)
        assert step.label == "Mark as Paid"
        assert step.status == OrderStatus.PAID

    def test_delivery_flow_steps(self):
        assert next_step("delivery", "paid").status == OrderStatus.PACKED
        assert next_step("delivery", "packed").status == OrderStatus.OUT_FOR_DELIVERY
        assert next_step("delivery", "out_for_delivery").status == OrderStatus.DELIVERED

    def test_collection_goes_straight_from_packed_to_collected(self):
        step = next_step("collection", "packed")
        assert step.label == "Mark Collected"
        assert step.status == OrderStatus.COLLECTED

    @pytest.mark.parametrize(
        "fulfillment_type,status",
        [("delivery", "delivered"), ("collection", "collected"), ("delivery", "cancelled")],
    )
    def test_terminal_statuses_have_no_next_step(self, fulfillment_type, status):
        assert next_step(fulfillment_type, status) is None


class TestAllowedTargets:
    def test_non_terminal_status_allows_forward_step_and_cancel(self):
        assert allowed_targets("delivery", "paid") == {OrderStatus.PACKED, OrderStatus.CANCELLED}

    def test_terminal_status_allows_nothing(self):
        assert allowed_targets("collection", "collected") == frozenset()
        assert allowed_targets("delivery", "cancelled") == frozenset()

    def test_collection_never_reaches_out_for_delivery(self):
        for status in OrderStatus:
            assert OrderStatus.OUT_FOR_DELIVERY not in allowed_targets("collection", status)

    def test_delivery_never_reaches_collected(self):
        for status in OrderStatus:
            assert OrderStatus.COLLECTED not in allowed_targets("delivery", status)


class TestCoercion:
    def test_status_is_case_insensitive(self):
        assert coerce_status(" PAID ") == OrderStatus.PAID

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            coerce_status("shipped")
        assert "status" in exc.value.messages


class TestTimeline:
    def test_delivery_timeline_at_packed(self):
        timeline = build_timeline(FulfillmentType.DELIVERY, OrderStatus.PACKED)
        assert [row.status for row in timeline] == [
            OrderStatus.PAID,
            OrderStatus.PACKED,
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,
        ]
        assert [row.state for row in timeline] == [
            StepState.COMPLETED,
            StepState.COMPLETED,
            StepState.PENDING,
            StepState.PENDING,
        ]

    def test_unpaid_order_has_every_step_pending(self):
        timeline = build_timeline("collection", "unpaid")
        assert all(row.state is StepState.PENDING for row in timeline)

    def test_cancelled_order_marks_every_step_cancelled(self):
        timeline = build_timeline("delivery", "cancelled")
        assert all(row.state is StepState.CANCELLED for row in timeline)

    def test_milestone_timestamps_ride_along(self):
        stamp = object()
        timeline = build_timeline("collection", "paid", {OrderStatus.PAID: stamp})
        assert timeline[0].reached_at is stamp
        assert timeline[1].reached_at is None

    def test_state_ignores_missing_timestamps(self):
        flow = (OrderStatus.PAID, OrderStatus.PACKED, OrderStatus.COLLECTED)
        assert step_status(flow, "collected", "paid") is StepState.COMPLETED
