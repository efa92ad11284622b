"""FastAPI endpoints for the Contacts domain."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from contacts.api.schemas import ContactIdResponse, ContactResponse, SaveContactRequest, StatusResponse
from contacts.contact.contact import Contact
from contacts.contact.management import DeleteContact, SaveContact

router = APIRouter(prefix="/contacts", tags=["contacts"])


def _contact_response(contact: Contact) -> ContactResponse:
    return ContactResponse(
        contact_id=str(contact.id),
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        source=contact.source,
        notes=contact.notes,
        subscribed=bool(contact.subscribed),
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )


@router.get("", response_model=list[ContactResponse])
async def list_contacts(search: str | None = None, subscribed: bool | None = None) -> list[ContactResponse]:
    contacts = current_domain.repository_for(Contact)._dao.query.limit(None).all().items
    if subscribed is not None:
        contacts = [contact for contact in contacts if bool(contact.subscribed) == subscribed]
    if search:
        needle = search.strip().lower()
        contacts = [
            contact
            for contact in contacts
            if needle in contact.email or needle in (contact.name or "").lower() or needle in (contact.phone or "")
        ]
    contacts.sort(key=lambda contact: contact.created_at, reverse=True)
    return [_contact_response(contact) for contact in contacts]


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(contact_id: str) -> ContactResponse:
    return _contact_response(current_domain.repository_for(Contact).get(contact_id))


@router.post("", status_code=201, response_model=ContactIdResponse)
async def save_contact(body: SaveContactRequest) -> ContactIdResponse:
    command = SaveContact(
        contact_id=body.contact_id,
        email=body.email,
        name=body.name,
        phone=body.phone,
        source=body.source,
        notes=body.notes,
        subscribed=body.subscribed,
    )
    result = current_domain.process(command, asynchronous=False)
    return ContactIdResponse(contact_id=result)


@router.delete("/{contact_id}", response_model=StatusResponse)
async def delete_contact(contact_id: str) -> StatusResponse:
    current_domain.process(DeleteContact(contact_id=contact_id), asynchronous=False)
    return StatusResponse()
