"""Course booking management: record, invitation status and delete."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from courses.course.course import Course, coerce_course_type
from courses.course.management import find_by_slug
from courses.domain import courses
from courses.purchase.purchase import (
    CoursePurchase,
    PaymentKind,
    coerce_invitation_status,
    coerce_payment_kind,
)

logger = structlog.get_logger(__name__)


@courses.command(part_of="CoursePurchase")
class RecordCoursePurchase:
    """Book a course against the checkout order that pays for it."""

    order_id: Identifier(required=True)
    order_number: String(max_length=50)
    course_slug: String(required=True, max_length=200)
    buyer_name: String(required=True, max_length=200)
    buyer_email: String(required=True, max_length=254)
    buyer_phone: String(max_length=30)
    selected_package: String(max_length=120)
    selected_date: String(max_length=100)
    payment_kind: String(max_length=20)
    full_price_cents: Integer(required=True)
    deposit_cents: Integer()


@courses.command(part_of="CoursePurchase")
class SetInvitationStatus:
    purchase_id: Identifier(required=True)
    invitation_status: String(required=True, max_length=20)


@courses.command(part_of="CoursePurchase")
class DeleteCoursePurchase:
    purchase_id: Identifier(required=True)


@courses.command_handler(part_of=CoursePurchase)
class ManageCoursePurchaseHandler:
    @handle(RecordCoursePurchase)
    def record_course_purchase(self, command):
        course: Course | None = find_by_slug(command.course_slug.strip().lower())
        if course is None:
            raise ValidationError({"course_slug": [f"No course with slug {command.course_slug!r}"]})

        payment_kind = coerce_payment_kind(command.payment_kind)
        if payment_kind is PaymentKind.DEPOSIT and not command.deposit_cents:
            raise ValidationError({"deposit_cents": ["Deposit bookings need a deposit amount"]})

        purchase = CoursePurchase.record(
            order_id=command.order_id,
            order_number=command.order_number,
            course_slug=course.slug,
            course_title=course.title,
            course_type=coerce_course_type(course.course_type).value,
            buyer_name=command.buyer_name.strip(),
            buyer_email=command.buyer_email.strip().lower(),
            buyer_phone=(command.buyer_phone or "").strip() or None,
            selected_package=command.selected_package,
            selected_date=command.selected_date,
            payment_kind=payment_kind.value,
            full_price_cents=command.full_price_cents,
            deposit_cents=command.deposit_cents if payment_kind is PaymentKind.DEPOSIT else None,
        )
        current_domain.repository_for(CoursePurchase).add(purchase)
        logger.info(
            "Course purchase recorded",
            purchase_id=str(purchase.id),
            course_slug=purchase.course_slug,
            order_id=str(purchase.order_id),
        )
        return str(purchase.id)

    @handle(SetInvitationStatus)
    def set_invitation_status(self, command):
        repo = current_domain.repository_for(CoursePurchase)
        purchase = repo.get(command.purchase_id)
        purchase.set_invitation_status(coerce_invitation_status(command.invitation_status))
        repo.add(purchase)
        logger.info("Course invitation updated", purchase_id=str(purchase.id), status=purchase.invitation_status)

    @handle(DeleteCoursePurchase)
    def delete_course_purchase(self, command):
        repo = current_domain.repository_for(CoursePurchase)
        purchase = repo.get(command.purchase_id)
        repo._dao.delete(purchase)
        logger.info("Course purchase deleted", purchase_id=str(purchase.id), order_id=str(purchase.order_id))
        return str(purchase.order_id)
