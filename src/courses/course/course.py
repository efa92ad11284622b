"""Course aggregate with its booking packages.

Online courses are sold outright at ``price_cents``. In-person courses are
booked with a deposit against one of the listed dates and packages, so they
must carry all three. Switching a course to online drops its in-person
booking details.
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from courses.domain import courses

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class CourseType(Enum):
    ONLINE = "online"
    IN_PERSON = "in-person"


def coerce_course_type(value: str | None) -> CourseType:
    if not value:
        return CourseType.IN_PERSON
    try:
        return CourseType(value.strip().lower())
    except ValueError:
        raise ValidationError({"course_type": [f"Unknown course type: {value!r}"]}) from None


def text_list(values) -> list[str]:
    """Trimmed, non-empty strings from a list (or JSON list)."""
    if isinstance(values, str):
        values = json.loads(values) if values.strip() else []
    return [str(value).strip() for value in values or [] if value is not None and str(value).strip()]


@courses.event(part_of="Course")
class CourseSaved:
    __version__ = 1

    course_id: Identifier(required=True)
    slug: String(required=True)
    title: String(required=True)
    course_type: String(required=True)
    is_active: Boolean(required=True)
    created: Boolean(required=True)
    saved_at: DateTime(required=True)


@courses.entity(part_of="Course")
class CoursePackage:
    """A bookable tier of an in-person course."""

    name: String(required=True, max_length=120)
    price_cents: Integer(required=True, min_value=1)
    kit_value_cents: Integer(min_value=0)
    features: Text()  # JSON list of strings
    popular: Boolean(default=False)
    position: Integer(default=0)

    @property
    def feature_list(self) -> list[str]:
        return json.loads(self.features) if self.features else []


@courses.aggregate
class Course:
    title: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text()
    price_cents: Integer(min_value=0)
    compare_at_price_cents: Integer(min_value=0)
    image_url: String(max_length=500)
    duration: String(max_length=100)
    level: String(max_length=50)
    template_key: String(max_length=50)
    course_type: String(choices=CourseType, default=CourseType.IN_PERSON.value)
    is_active: Boolean(default=True)
    deposit_cents: Integer(min_value=0)
    available_dates: Text()  # JSON list of strings
    key_details: Text()  # JSON list of strings
    packages: HasMany(CoursePackage)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if not _SLUG_PATTERN.match(self.slug or ""):
            raise ValidationError(
                {"slug": ["Slug must contain only lowercase alphanumeric characters and single hyphens"]}
            )

    @invariant.post
    def compare_at_price_must_exceed_price(self):
        if self.compare_at_price_cents and self.compare_at_price_cents <= (self.price_cents or 0):
            raise ValidationError({"compare_at_price_cents": ["Compare-at price must be higher than the price"]})

    @property
    def is_in_person(self) -> bool:
        return self.course_type == CourseType.IN_PERSON.value

    @property
    def dates(self) -> list[str]:
        return json.loads(self.available_dates) if self.available_dates else []

    @property
    def details(self) -> list[str]:
        return json.loads(self.key_details) if self.key_details else []

    @property
    def sorted_packages(self) -> list:
        return sorted(self.packages or [], key=lambda package: package.position or 0)

    @classmethod
    def create(cls, title, slug, course_type, booking=None, **details):
        now = datetime.now(UTC)
        course = cls(
            title=title,
            slug=slug,
            course_type=course_type.value,
            created_at=now,
            updated_at=now,
            **details,
        )
        course._apply_booking(course_type, booking or {})
        course._raise_saved(created=True, now=now)
        return course

    def revise(self, course_type, booking=None, **details) -> None:
        now = datetime.now(UTC)
        with atomic_change(self):
            for field_name, value in details.items():
                setattr(self, field_name, value)
            self.course_type = course_type.value
            self._apply_booking(course_type, booking or {})
            self.updated_at = now
        self._raise_saved(created=False, now=now)

    def set_active(self, is_active: bool) -> None:
        if bool(self.is_active) == is_active:
            return
        now = datetime.now(UTC)
        self.is_active = is_active
        self.updated_at = now
        self._raise_saved(created=False, now=now)

    def _apply_booking(self, course_type: CourseType, booking: dict) -> None:
        """Set deposit, dates, packages and key details for ``course_type``."""
        for existing in list(self.packages or []):
            self.remove_packages(existing)

        if course_type is CourseType.ONLINE:
            self.deposit_cents = None
            self.available_dates = None
            self.key_details = None
            return

        deposit = booking.get("deposit_cents")
        dates = text_list(booking.get("available_dates"))
        packages = [_package(data) for data in booking.get("packages") or []]
        packages = [data for data in packages if data is not None]

        if not deposit or deposit <= 0:
            raise ValidationError({"deposit_cents": ["Deposit amount is required for in-person courses"]})
        if not dates:
            raise ValidationError({"available_dates": ["Available dates are required for in-person courses"]})
        if not packages:
            raise ValidationError({"packages": ["At least one package is required for in-person courses"]})

        self.deposit_cents = deposit
        self.available_dates = json.dumps(dates)
        details = text_list(booking.get("key_details"))
        self.key_details = json.dumps(details) if details else None
        for position, data in enumerate(packages):
            self.add_packages(CoursePackage(position=position, **data))

    def _raise_saved(self, created: bool, now: datetime) -> None:
        self.raise_(
            CourseSaved(
                course_id=str(self.id),
                slug=self.slug,
                title=self.title,
                course_type=self.course_type,
                is_active=bool(self.is_active),
                created=created,
                saved_at=now,
            )
        )


def _package(data: dict) -> dict | None:
    name = str(data.get("name") or "").strip()
    features = text_list(data.get("features"))
    price = data.get("price_cents")
    kit_value = data.get("kit_value_cents")
    popular = bool(data.get("popular"))
    if not (name or price is not None or features or kit_value is not None or popular):
        return None

    if not name:
        raise ValidationError({"packages": ["Package name is required"]})
    if price is None:
        raise ValidationError({"packages": [f"Package {name!r} needs a price"]})
    if not features:
        raise ValidationError({"packages": [f"Package {name!r} needs at least one feature"]})
    return {
        "name": name,
        "price_cents": price,
        "kit_value_cents": kit_value,
        "features": json.dumps(features),
        "popular": popular,
    }
