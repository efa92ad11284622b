"""Pydantic request/response schemas for the Courses API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Course schemas ---


class PackageSchema(BaseModel):
    name: str = Field(..., max_length=120)
    price_cents: int | None = Field(None, ge=1)
    kit_value_cents: int | None = Field(None, ge=0)
    features: list[str] = Field(default_factory=list)
    popular: bool = False


class SaveCourseRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Acrylic Nail Masterclass",
                    "slug": "acrylic-masterclass",
                    "course_type": "in-person",
                    "price_cents": 450000,
                    "deposit_cents": 150000,
                    "duration": "2 days",
                    "available_dates": ["14-15 March 2026", "11-12 April 2026"],
                    "packages": [
                        {
                            "name": "Standard",
                            "price_cents": 450000,
                            "kit_value_cents": 120000,
                            "features": ["Starter kit", "Certificate"],
                        }
                    ],
                    "key_details": ["Lunch included"],
                }
            ]
        }
    }

    course_id: str | None = None
    title: str = Field(..., max_length=255)
    slug: str = Field(..., max_length=200)
    description: str | None = None
    price_cents: int | None = Field(None, ge=0)
    compare_at_price_cents: int | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=500)
    duration: str | None = Field(None, max_length=100)
    level: str | None = Field(None, max_length=50)
    template_key: str | None = Field(None, max_length=50)
    course_type: str = "in-person"
    is_active: bool = True
    deposit_cents: int | None = None
    available_dates: list[str] = Field(default_factory=list)
    packages: list[PackageSchema] = Field(default_factory=list)
    key_details: list[str] = Field(default_factory=list)


class SetCourseActiveRequest(BaseModel):
    is_active: bool


class CourseIdResponse(BaseModel):
    course_id: str


class PackageResponse(BaseModel):
    name: str
    price_cents: int
    kit_value_cents: int | None = None
    features: list[str]
    popular: bool


class CourseResponse(BaseModel):
    course_id: str
    title: str
    slug: str
    description: str | None = None
    price_cents: int | None = None
    compare_at_price_cents: int | None = None
    image_url: str | None = None
    duration: str | None = None
    level: str | None = None
    template_key: str | None = None
    course_type: str
    is_active: bool
    deposit_cents: int | None = None
    available_dates: list[str]
    packages: list[PackageResponse]
    key_details: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- Booking schemas ---


class RecordCoursePurchaseRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "ord-001",
                    "order_number": "BL-1042",
                    "course_slug": "acrylic-masterclass",
                    "buyer_name": "Zanele Dlamini",
                    "buyer_email": "zanele@example.co.za",
                    "selected_package": "Standard",
                    "selected_date": "14-15 March 2026",
                    "payment_kind": "deposit",
                    "full_price_cents": 450000,
                    "deposit_cents": 150000,
                }
            ]
        }
    }

    order_id: str
    order_number: str | None = Field(None, max_length=50)
    course_slug: str = Field(..., max_length=200)
    buyer_name: str = Field(..., max_length=200)
    buyer_email: str = Field(..., max_length=254)
    buyer_phone: str | None = Field(None, max_length=30)
    selected_package: str | None = Field(None, max_length=120)
    selected_date: str | None = Field(None, max_length=100)
    payment_kind: str = "full"
    full_price_cents: int = Field(..., ge=1)
    deposit_cents: int | None = Field(None, ge=1)


class SetInvitationStatusRequest(BaseModel):
    invitation_status: str


class PurchaseIdResponse(BaseModel):
    purchase_id: str


class PurchaseDeletedResponse(BaseModel):
    status: str = "ok"
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CoursePurchaseResponse(BaseModel):
    purchase_id: str
    order_id: str
    order_number: str | None = None
    course_slug: str
    course_title: str | None = None
    course_type: str
    buyer_name: str
    buyer_email: str
    buyer_phone: str | None = None
    selected_package: str | None = None
    selected_date: str | None = None
    payment_kind: str
    full_price_cents: int
    deposit_cents: int | None = None
    amount_due_cents: int
    amount_paid_cents: int
    balance_cents: int
    invitation_status: str
    booking_status: str
    invited_at: datetime | None = None
    paid_at: datetime | None = None
    created_at: datetime | None = None
