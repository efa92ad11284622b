"""Application tests for contact commands."""

import pytest
from contacts.contact.contact import Contact
from contacts.contact.management import DeleteContact, SaveContact, find_by_email
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _save(**fields):
    return current_domain.process(SaveContact(**{"email": "palesa@example.co.za", **fields}), asynchronous=False)


class TestSaveContact:
    def test_create(self):
        contact = current_domain.repository_for(Contact).get(_save(name=" Palesa ", source="contact_form"))
        assert contact.name == "Palesa"
        assert contact.source == "contact_form"

    def test_same_email_updates_existing_contact(self):
        first = _save(name="Palesa")
        second = _save(email="PALESA@example.co.za", name="Palesa M", subscribed=False)

        assert first == second
        contact = find_by_email("palesa@example.co.za")
        assert contact.name == "Palesa M"
        assert contact.subscribed is False

    def test_email_taken_by_another_contact(self):
        _save(email="one@example.co.za")
        other_id = _save(email="two@example.co.za")

        with pytest.raises(ValidationError) as exc:
            _save(contact_id=other_id, email="one@example.co.za")
        assert "email" in exc.value.messages

    def test_change_email_by_id(self):
        contact_id = _save(email="old@example.co.za")
        _save(contact_id=contact_id, email="new@example.co.za")
        assert current_domain.repository_for(Contact).get(contact_id).email == "new@example.co.za"


class TestDeleteContact:
    def test_delete(self):
        contact_id = _save()
        current_domain.process(DeleteContact(contact_id=contact_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Contact).get(contact_id)

    def test_delete_unknown(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteContact(contact_id="missing"), asynchronous=False)
