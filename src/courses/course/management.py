"""Course management: save (create or update) and activate/deactivate."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from courses.course.course import Course, coerce_course_type
from courses.domain import courses

logger = structlog.get_logger(__name__)


def find_by_slug(slug: str) -> Course | None:
    matches = current_domain.repository_for(Course)._dao.query.filter(slug=slug).all().items
    return matches[0] if matches else None


@courses.command(part_of="Course")
class SaveCourse:
    course_id: Identifier()
    title: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text()
    price_cents: Integer(min_value=0)
    compare_at_price_cents: Integer(min_value=0)
    image_url: String(max_length=500)
    duration: String(max_length=100)
    level: String(max_length=50)
    template_key: String(max_length=50)
    course_type: String(max_length=20)
    is_active: Boolean(default=True)
    deposit_cents: Integer()
    available_dates: Text()  # JSON list of strings
    packages: Text()  # JSON list of {name, price_cents, kit_value_cents, features, popular}
    key_details: Text()  # JSON list of strings


@courses.command(part_of="Course")
class SetCourseActive:
    course_id: Identifier(required=True)
    is_active: Boolean(required=True)


@courses.command_handler(part_of=Course)
class ManageCourseHandler:
    @handle(SaveCourse)
    def save_course(self, command):
        repo = current_domain.repository_for(Course)
        title = command.title.strip()
        slug = command.slug.strip().lower()
        if not title:
            raise ValidationError({"title": ["Title is required"]})

        course_type = coerce_course_type(command.course_type)
        booking = {
            "deposit_cents": command.deposit_cents,
            "available_dates": command.available_dates,
            "packages": json.loads(command.packages) if command.packages else [],
            "key_details": command.key_details,
        }
        details = {
            "description": command.description,
            "price_cents": command.price_cents,
            "compare_at_price_cents": command.compare_at_price_cents,
            "image_url": command.image_url,
            "duration": command.duration,
            "level": command.level,
            "template_key": command.template_key,
            "is_active": command.is_active,
        }

        existing = find_by_slug(slug)
        if command.course_id:
            course = repo.get(command.course_id)
            if existing is not None and existing.id != course.id:
                raise ValidationError({"slug": ["Another course already uses this slug"]})
            course.revise(course_type, booking=booking, title=title, slug=slug, **details)
        else:
            if existing is not None:
                raise ValidationError({"slug": ["Another course already uses this slug"]})
            course = Course.create(title, slug, course_type, booking=booking, **details)

        repo.add(course)
        logger.info("Course saved", course_id=str(course.id), slug=course.slug, course_type=course.course_type)
        return str(course.id)

    @handle(SetCourseActive)
    def set_course_active(self, command):
        repo = current_domain.repository_for(Course)
        course = repo.get(command.course_id)
        course.set_active(command.is_active)
        repo.add(course)
