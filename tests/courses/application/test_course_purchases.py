"""Application tests for course bookings and their order payments.

The Ordering handler is called directly with the shared event contract, the
way the engine would deliver it from the ``ordering::order`` stream.
"""

from datetime import UTC, datetime

import pytest
from courses.course.management import SaveCourse
from courses.purchase.management import DeleteCoursePurchase, RecordCoursePurchase, SetInvitationStatus
from courses.purchase.order_events import OrderingCoursesEventHandler
from courses.purchase.purchase import CoursePurchase
from courses.purchase.queries import list_purchases
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.events.ordering import OrderPaid


@pytest.fixture()
def course_slug():
    command = SaveCourse(title="Online Nail Art", slug="online-nail-art", course_type="online", price_cents=99900)
    current_domain.process(command, asynchronous=False)
    return "online-nail-art"


def _book(course_slug, **fields):
    command = RecordCoursePurchase(
        **{
            "order_id": "ord-c-001",
            "order_number": "BL-7001",
            "course_slug": course_slug,
            "buyer_name": "Zanele Dlamini",
            "buyer_email": " Zanele@Example.co.za ",
            "full_price_cents": 99900,
            **fields,
        }
    )
    return current_domain.process(command, asynchronous=False)


def _get(purchase_id):
    return current_domain.repository_for(CoursePurchase).get(purchase_id)


def _paid(order_id, total_cents):
    return OrderPaid(
        order_id=order_id,
        order_number="BL-7001",
        items="[]",
        total_cents=total_cents,
        paid_at=datetime.now(UTC),
    )


class TestRecordCoursePurchase:
    def test_copies_course_details(self, course_slug):
        purchase = _get(_book(course_slug))

        assert purchase.course_title == "Online Nail Art"
        assert purchase.course_type == "online"
        assert purchase.buyer_email == "zanele@example.co.za"
        assert purchase.booking_status == "pending"

    def test_unknown_course_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _book("no-such-course")
        assert "course_slug" in exc.value.messages

    def test_deposit_booking_needs_a_deposit(self, course_slug):
        with pytest.raises(ValidationError):
            _book(course_slug, payment_kind="deposit")


class TestOrderPayment:
    def test_paid_order_marks_its_booking_paid(self, course_slug):
        purchase_id = _book(course_slug, order_id="ord-c-002")

        OrderingCoursesEventHandler().on_order_paid(_paid("ord-c-002", 99900))

        purchase = _get(purchase_id)
        assert purchase.booking_status == "paid"
        assert purchase.amount_paid_cents == 99900

    def test_deposit_payment_leaves_a_balance(self, course_slug):
        purchase_id = _book(course_slug, order_id="ord-c-003", payment_kind="deposit", deposit_cents=30000)

        OrderingCoursesEventHandler().on_order_paid(_paid("ord-c-003", 30000))

        purchase = _get(purchase_id)
        assert purchase.booking_status == "deposit_paid"
        assert purchase.balance_cents == 69900

    def test_other_orders_are_ignored(self, course_slug):
        purchase_id = _book(course_slug, order_id="ord-c-004")

        OrderingCoursesEventHandler().on_order_paid(_paid("ord-somewhere-else", 99900))

        assert _get(purchase_id).paid_at is None


class TestBookingAdmin:
    def test_invitation_sent(self, course_slug):
        purchase_id = _book(course_slug, order_id="ord-c-005")

        command = SetInvitationStatus(purchase_id=purchase_id, invitation_status="sent")
        current_domain.process(command, asynchronous=False)

        assert _get(purchase_id).invitation_status == "sent"
        assert [str(purchase.id) for purchase in list_purchases(invitation_status="sent")] == [purchase_id]

    def test_filters(self, course_slug):
        _book(course_slug, order_id="ord-c-006", buyer_email="lerato@example.co.za")

        found = list_purchases(course_slug=course_slug, buyer_email="LERATO")

        assert [purchase.buyer_email for purchase in found] == ["lerato@example.co.za"]

    def test_delete_returns_the_order(self, course_slug):
        purchase_id = _book(course_slug, order_id="ord-c-007")

        order_id = current_domain.process(DeleteCoursePurchase(purchase_id=purchase_id), asynchronous=False)

        assert order_id == "ord-c-007"
        with pytest.raises(ObjectNotFoundError):
            _get(purchase_id)
