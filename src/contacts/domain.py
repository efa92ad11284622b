"""Contacts bounded context: customers and leads the store can reach."""

import structlog
from protean.domain import Domain

contacts = Domain(name="contacts")

logger = structlog.get_logger(__name__)
