"""CoursePurchase aggregate: one booking of a course by one buyer.

Each booking is tied to the checkout order that pays for it. A booking is
``pending`` until the class invitation is sent (``sent``) or fails to send
(``failed``); once its order is paid, the payment status takes precedence in
``booking_status``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from courses.course.course import CourseType
from courses.domain import courses


class InvitationStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class PaymentKind(Enum):
    FULL = "full"
    DEPOSIT = "deposit"


def coerce_invitation_status(value: str | None) -> InvitationStatus:
    try:
        return InvitationStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError({"invitation_status": [f"Unknown invitation status: {value!r}"]}) from None


def coerce_payment_kind(value: str | None) -> PaymentKind:
    if not value:
        return PaymentKind.FULL
    try:
        return PaymentKind(value.strip().lower())
    except ValueError:
        raise ValidationError({"payment_kind": [f"Unknown payment kind: {value!r}"]}) from None


@courses.event(part_of="CoursePurchase")
class CoursePurchasePaid:
    __version__ = 1

    purchase_id: Identifier(required=True)
    order_id: Identifier(required=True)
    course_slug: String(required=True)
    amount_paid_cents: Integer(required=True)
    paid_at: DateTime(required=True)


@courses.aggregate
class CoursePurchase:
    order_id: Identifier(required=True)
    order_number: String(max_length=50)
    course_slug: String(required=True, max_length=200)
    course_title: String(max_length=255)
    course_type: String(choices=CourseType, default=CourseType.IN_PERSON.value)
    buyer_name: String(required=True, max_length=200)
    buyer_email: String(required=True, max_length=254)
    buyer_phone: String(max_length=30)
    selected_package: String(max_length=120)
    selected_date: String(max_length=100)
    payment_kind: String(choices=PaymentKind, default=PaymentKind.FULL.value)
    full_price_cents: Integer(required=True, min_value=1)
    deposit_cents: Integer(min_value=1)
    amount_paid_cents: Integer(default=0, min_value=0)
    invitation_status: String(choices=InvitationStatus, default=InvitationStatus.PENDING.value)
    invited_at: DateTime()
    paid_at: DateTime()
    created_at: DateTime()

    @invariant.post
    def deposit_bookings_need_a_deposit(self):
        if self.payment_kind == PaymentKind.DEPOSIT.value and not self.deposit_cents:
            raise ValidationError({"deposit_cents": ["Deposit bookings need a deposit amount"]})

    @property
    def amount_due_cents(self) -> int:
        """What the booking's order charges: the deposit or the full price."""
        if self.payment_kind == PaymentKind.DEPOSIT.value:
            return self.deposit_cents
        return self.full_price_cents

    @property
    def balance_cents(self) -> int:
        return max(0, self.full_price_cents - (self.amount_paid_cents or 0))

    @property
    def booking_status(self) -> str:
        if self.paid_at is not None:
            return "deposit_paid" if self.balance_cents > 0 else "paid"
        return self.invitation_status

    @classmethod
    def record(cls, **details):
        return cls(created_at=datetime.now(UTC), **details)

    def mark_paid(self, amount_paid_cents: int, paid_at: datetime) -> bool:
        """Book the order payment. Returns False if it was already booked."""
        if self.paid_at is not None:
            return False
        self.amount_paid_cents = amount_paid_cents
        self.paid_at = paid_at
        self.raise_(
            CoursePurchasePaid(
                purchase_id=str(self.id),
                order_id=str(self.order_id),
                course_slug=self.course_slug,
                amount_paid_cents=amount_paid_cents,
                paid_at=paid_at,
            )
        )
        return True

    def set_invitation_status(self, status: InvitationStatus) -> None:
        self.invitation_status = status.value
        self.invited_at = datetime.now(UTC) if status is InvitationStatus.SENT else None
