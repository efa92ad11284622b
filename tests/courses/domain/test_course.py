"""Tests for the Course aggregate."""

import json

import pytest
from courses.course.course import Course, CourseSaved, CourseType, coerce_course_type, text_list
from protean.exceptions import ValidationError


def _booking(**overrides):
    booking = {
        "deposit_cents": 150000,
        "available_dates": ["14-15 March 2026", " ", "11-12 April 2026"],
        "packages": [
            {"name": "Standard", "price_cents": 450000, "features": ["Starter kit", "Certificate"]},
            {"name": "Deluxe", "price_cents": 650000, "kit_value_cents": 200000, "features": "[\"Pro kit\"]"},
        ],
        "key_details": ["Lunch included"],
    }
    booking.update(overrides)
    return booking


class TestInPersonCourse:
    def test_create_keeps_booking_details(self):
        course = Course.create("Acrylic Masterclass", "acrylic-masterclass", CourseType.IN_PERSON, booking=_booking())

        assert course.is_in_person
        assert course.deposit_cents == 150000
        assert course.dates == ["14-15 March 2026", "11-12 April 2026"]
        assert [package.name for package in course.sorted_packages] == ["Standard", "Deluxe"]
        assert course.sorted_packages[1].feature_list == ["Pro kit"]
        assert course.details == ["Lunch included"]
        assert isinstance(course._events[-1], CourseSaved)
        assert course._events[-1].created is True

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"deposit_cents": None}, "deposit_cents"),
            ({"deposit_cents": 0}, "deposit_cents"),
            ({"available_dates": []}, "available_dates"),
            ({"packages": []}, "packages"),
        ],
    )
    def test_booking_details_are_required(self, overrides, field):
        with pytest.raises(ValidationError) as exc:
            Course.create("Gel Basics", "gel-basics", CourseType.IN_PERSON, booking=_booking(**overrides))
        assert field in exc.value.messages

    def test_blank_package_rows_are_dropped(self):
        packages = [{"name": "Standard", "price_cents": 450000, "features": ["Kit"]}, {"name": "", "features": []}]
        course = Course.create("Gel Basics", "gel-basics", CourseType.IN_PERSON, booking=_booking(packages=packages))
        assert len(course.packages) == 1

    @pytest.mark.parametrize(
        "package",
        [
            {"price_cents": 450000, "features": ["Kit"]},
            {"name": "Standard", "features": ["Kit"]},
            {"name": "Standard", "price_cents": 450000, "features": []},
        ],
    )
    def test_incomplete_packages_are_rejected(self, package):
        with pytest.raises(ValidationError) as exc:
            Course.create("Gel Basics", "gel-basics", CourseType.IN_PERSON, booking=_booking(packages=[package]))
        assert "packages" in exc.value.messages


class TestOnlineCourse:
    def test_switching_to_online_drops_booking_details(self):
        course = Course.create("Nail Art", "nail-art", CourseType.IN_PERSON, booking=_booking())

        course.revise(CourseType.ONLINE, title="Nail Art Online", price_cents=99900)

        assert course.course_type == "online"
        assert course.deposit_cents is None
        assert course.dates == []
        assert not course.packages
        assert course._events[-1].created is False

    def test_online_course_needs_no_booking(self):
        course = Course.create("Cuticle Care", "cuticle-care", CourseType.ONLINE, price_cents=49900)
        assert course.price_cents == 49900


class TestCourseRules:
    def test_slug_must_be_url_safe(self):
        with pytest.raises(ValidationError) as exc:
            Course.create("Nail Art", "Nail Art!", CourseType.ONLINE)
        assert "slug" in exc.value.messages

    def test_compare_at_price_must_exceed_price(self):
        with pytest.raises(ValidationError):
            Course.create("Nail Art", "nail-art", CourseType.ONLINE, price_cents=49900, compare_at_price_cents=49900)

    def test_set_active_is_idempotent(self):
        course = Course.create("Nail Art", "nail-art", CourseType.ONLINE)
        events = len(course._events)

        course.set_active(True)
        assert len(course._events) == events

        course.set_active(False)
        assert course.is_active is False
        assert course._events[-1].is_active is False

    def test_coerce_course_type(self):
        assert coerce_course_type(None) is CourseType.IN_PERSON
        assert coerce_course_type(" Online ") is CourseType.ONLINE
        with pytest.raises(ValidationError):
            coerce_course_type("hybrid")

    def test_text_list_accepts_json(self):
        assert text_list(json.dumps([" a ", "", None, 3])) == ["a", "3"]
