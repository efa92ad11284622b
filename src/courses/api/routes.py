"""FastAPI endpoints for the Courses domain."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from courses.api.schemas import (
    CourseIdResponse,
    CoursePurchaseResponse,
    CourseResponse,
    PackageResponse,
    PurchaseDeletedResponse,
    PurchaseIdResponse,
    RecordCoursePurchaseRequest,
    SaveCourseRequest,
    SetCourseActiveRequest,
    SetInvitationStatusRequest,
    StatusResponse,
)
from courses.course.course import Course
from courses.course.management import SaveCourse, SetCourseActive
from courses.purchase.management import DeleteCoursePurchase, RecordCoursePurchase, SetInvitationStatus
from courses.purchase.purchase import CoursePurchase
from courses.purchase.queries import list_purchases

course_router = APIRouter(prefix="/courses", tags=["courses"])
purchase_router = APIRouter(prefix="/course-purchases", tags=["courses"])


def course_response(course: Course) -> CourseResponse:
    return CourseResponse(
        course_id=str(course.id),
        title=course.title,
        slug=course.slug,
        description=course.description,
        price_cents=course.price_cents,
        compare_at_price_cents=course.compare_at_price_cents,
        image_url=course.image_url,
        duration=course.duration,
        level=course.level,
        template_key=course.template_key,
        course_type=course.course_type,
        is_active=bool(course.is_active),
        deposit_cents=course.deposit_cents,
        available_dates=course.dates,
        packages=[
            PackageResponse(
                name=package.name,
                price_cents=package.price_cents,
                kit_value_cents=package.kit_value_cents,
                features=package.feature_list,
                popular=bool(package.popular),
            )
            for package in course.sorted_packages
        ],
        key_details=course.details,
        created_at=course.created_at,
        updated_at=course.updated_at,
    )


def purchase_response(purchase: CoursePurchase) -> CoursePurchaseResponse:
    return CoursePurchaseResponse(
        purchase_id=str(purchase.id),
        order_id=str(purchase.order_id),
        order_number=purchase.order_number,
        course_slug=purchase.course_slug,
        course_title=purchase.course_title,
        course_type=purchase.course_type,
        buyer_name=purchase.buyer_name,
        buyer_email=purchase.buyer_email,
        buyer_phone=purchase.buyer_phone,
        selected_package=purchase.selected_package,
        selected_date=purchase.selected_date,
        payment_kind=purchase.payment_kind,
        full_price_cents=purchase.full_price_cents,
        deposit_cents=purchase.deposit_cents,
        amount_due_cents=purchase.amount_due_cents,
        amount_paid_cents=purchase.amount_paid_cents or 0,
        balance_cents=purchase.balance_cents,
        invitation_status=purchase.invitation_status,
        booking_status=purchase.booking_status,
        invited_at=purchase.invited_at,
        paid_at=purchase.paid_at,
        created_at=purchase.created_at,
    )


# --- Courses ---


@course_router.get("", response_model=list[CourseResponse])
async def list_courses(course_type: str | None = None, active: bool | None = None) -> list[CourseResponse]:
    query = current_domain.repository_for(Course)._dao.query.limit(None)
    courses = query.filter(course_type=course_type).all().items if course_type else query.all().items
    if active is not None:
        courses = [course for course in courses if bool(course.is_active) == active]
    courses.sort(key=lambda course: (course.title or "").lower())
    return [course_response(course) for course in courses]


@course_router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: str) -> CourseResponse:
    return course_response(current_domain.repository_for(Course).get(course_id))


@course_router.post("", status_code=201, response_model=CourseIdResponse)
async def save_course(body: SaveCourseRequest) -> CourseIdResponse:
    command = SaveCourse(
        course_id=body.course_id,
        title=body.title,
        slug=body.slug,
        description=body.description,
        price_cents=body.price_cents,
        compare_at_price_cents=body.compare_at_price_cents,
        image_url=body.image_url,
        duration=body.duration,
        level=body.level,
        template_key=body.template_key,
        course_type=body.course_type,
        is_active=body.is_active,
        deposit_cents=body.deposit_cents,
        available_dates=json.dumps(body.available_dates),
        packages=json.dumps([package.model_dump() for package in body.packages]),
        key_details=json.dumps(body.key_details),
    )
    result = current_domain.process(command, asynchronous=False)
    return CourseIdResponse(course_id=result)


@course_router.put("/{course_id}/active", response_model=StatusResponse)
async def set_course_active(course_id: str, body: SetCourseActiveRequest) -> StatusResponse:
    current_domain.process(SetCourseActive(course_id=course_id, is_active=body.is_active), asynchronous=False)
    return StatusResponse()


# --- Bookings ---


@purchase_router.get("", response_model=list[CoursePurchaseResponse])
async def get_purchases(
    course_slug: str | None = None,
    buyer_email: str | None = None,
    invitation_status: str | None = None,
    created_from: str | None = None,
    created_to: str | None = None,
) -> list[CoursePurchaseResponse]:
    purchases = list_purchases(
        course_slug=course_slug,
        buyer_email=buyer_email,
        invitation_status=invitation_status,
        created_from=created_from,
        created_to=created_to,
    )
    return [purchase_response(purchase) for purchase in purchases]


@purchase_router.get("/{purchase_id}", response_model=CoursePurchaseResponse)
async def get_purchase(purchase_id: str) -> CoursePurchaseResponse:
    return purchase_response(current_domain.repository_for(CoursePurchase).get(purchase_id))


@purchase_router.post("", status_code=201, response_model=PurchaseIdResponse)
async def record_purchase(body: RecordCoursePurchaseRequest) -> PurchaseIdResponse:
    command = RecordCoursePurchase(**body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return PurchaseIdResponse(purchase_id=result)


@purchase_router.put("/{purchase_id}/invitation", response_model=StatusResponse)
async def set_invitation_status(purchase_id: str, body: SetInvitationStatusRequest) -> StatusResponse:
    command = SetInvitationStatus(purchase_id=purchase_id, invitation_status=body.invitation_status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@purchase_router.delete("/{purchase_id}", response_model=PurchaseDeletedResponse)
async def delete_purchase(purchase_id: str) -> PurchaseDeletedResponse:
    order_id = current_domain.process(DeleteCoursePurchase(purchase_id=purchase_id), asynchronous=False)
    return PurchaseDeletedResponse(order_id=order_id)
