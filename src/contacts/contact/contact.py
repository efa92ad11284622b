"""Contact aggregate root."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from contacts.domain import contacts

_EMAIL_PATTERN = re.compile(
    r"^[^@\s;,()<>\"\\]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$"
)


class ContactSource(Enum):
    MANUAL = "manual"
    CONTACT_FORM = "contact_form"
    NEWSLETTER = "newsletter"
    CHECKOUT = "checkout"


def normalise_email(email: str | None) -> str:
    return (email or "").strip().lower()


def coerce_source(value: str | None) -> ContactSource:
    if not value:
        return ContactSource.MANUAL
    try:
        return ContactSource(value.strip().lower())
    except ValueError:
        raise ValidationError({"source": [f"Unknown contact source: {value!r}"]}) from None


@contacts.event(part_of="Contact")
class ContactSaved:
    __version__ = 1

    contact_id: Identifier(required=True)
    email: String(required=True)
    source: String(required=True)
    subscribed: Boolean(required=True)
    created: Boolean(required=True)
    saved_at: DateTime(required=True)


@contacts.aggregate
class Contact:
    name: String(max_length=200)
    email: String(required=True, max_length=254)
    phone: String(max_length=30)
    source: String(choices=ContactSource, default=ContactSource.MANUAL.value)
    notes: Text()
    subscribed: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_be_valid(self):
        if self.email != normalise_email(self.email) or ".." in self.email or not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @classmethod
    def create(cls, email, **details):
        now = datetime.now(UTC)
        contact = cls(email=normalise_email(email), created_at=now, updated_at=now, **details)
        contact._raise_saved(created=True, now=now)
        return contact

    def revise(self, **details) -> None:
        now = datetime.now(UTC)
        with atomic_change(self):
            for field_name, value in details.items():
                setattr(self, field_name, value)
            self.updated_at = now
        self._raise_saved(created=False, now=now)

    def _raise_saved(self, created: bool, now: datetime) -> None:
        self.raise_(
            ContactSaved(
                contact_id=str(self.id),
                email=self.email,
                source=self.source,
                subscribed=bool(self.subscribed),
                created=created,
                saved_at=now,
            )
        )
