"""Contact management: save and delete."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from contacts.contact.contact import Contact, coerce_source, normalise_email
from contacts.domain import contacts

logger = structlog.get_logger(__name__)


def find_by_email(email: str) -> Contact | None:
    matches = current_domain.repository_for(Contact)._dao.query.filter(email=normalise_email(email)).all().items
    return matches[0] if matches else None


@contacts.command(part_of="Contact")
class SaveContact:
    """Create a contact, or update the one with this id or email."""

    contact_id: Identifier()
    email: String(required=True, max_length=254)
    name: String(max_length=200)
    phone: String(max_length=30)
    source: String(max_length=20)
    notes: Text()
    subscribed: Boolean(default=True)


@contacts.command(part_of="Contact")
class DeleteContact:
    contact_id: Identifier(required=True)


@contacts.command_handler(part_of=Contact)
class ManageContactHandler:
    @handle(SaveContact)
    def save_contact(self, command):
        repo = current_domain.repository_for(Contact)
        details = {
            "name": (command.name or "").strip() or None,
            "phone": (command.phone or "").strip() or None,
            "source": coerce_source(command.source).value,
            "notes": command.notes,
            "subscribed": command.subscribed,
        }

        existing = find_by_email(command.email)
        if command.contact_id:
            contact = repo.get(command.contact_id)
            if existing is not None and existing.id != contact.id:
                raise ValidationError({"email": ["Another contact already uses this email"]})
            contact.revise(email=normalise_email(command.email), **details)
        elif existing is not None:
            contact = existing
            contact.revise(**details)
        else:
            contact = Contact.create(email=command.email, **details)

        repo.add(contact)
        logger.info("Contact saved", contact_id=str(contact.id), source=contact.source)
        return str(contact.id)

    @handle(DeleteContact)
    def delete_contact(self, command):
        repo = current_domain.repository_for(Contact)
        contact = repo.get(command.contact_id)
        repo._dao.delete(contact)
        logger.info("Contact deleted", contact_id=str(contact.id))
