"""Courses bounded context: the course catalog and course bookings.

A booking is recorded against the checkout order that pays for it and is
marked paid when Ordering reports that order paid.
"""

import structlog
from protean.domain import Domain

courses = Domain(name="courses")

logger = structlog.get_logger(__name__)
