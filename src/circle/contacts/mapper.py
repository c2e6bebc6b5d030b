"""
Conversions between ORM contacts and their transfer shape.

Pure functions: no validation and no I/O.
"""

from uuid import UUID

from circle.contacts.models import Contact, ContactEmail, ContactPhone
from circle.contacts.schemas import (
    ContactEmailRequest,
    ContactEmailResponse,
    ContactPhoneRequest,
    ContactPhoneResponse,
    ContactRequest,
    ContactResponse,
)


def to_response(contact: Contact) -> ContactResponse:
    """Map a persisted contact, with its emails and phones, to transfer shape."""
    return ContactResponse(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        title=contact.title,
        emails=[
            ContactEmailResponse(id=e.id, email=e.email, type=e.type)
            for e in contact.emails
        ],
        phones=[
            ContactPhoneResponse(id=p.id, phone_number=p.phone_number, type=p.type)
            for p in contact.phones
        ],
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )


def _build_emails(emails: list[ContactEmailRequest] | None) -> list[ContactEmail]:
    return [
        ContactEmail(email=e.email, type=e.type, position=index)
        for index, e in enumerate(emails or [])
    ]


def _build_phones(phones: list[ContactPhoneRequest] | None) -> list[ContactPhone]:
    return [
        ContactPhone(phone_number=p.phone_number, type=p.type, position=index)
        for index, p in enumerate(phones or [])
    ]


def to_entity(request: ContactRequest, user_id: UUID) -> Contact:
    """Build an unsaved contact owned by ``user_id``.

    Identifiers and timestamps stay unset until the contact is flushed.
    """
    return Contact(
        user_id=user_id,
        first_name=request.first_name,
        last_name=request.last_name,
        title=request.title,
        emails=_build_emails(request.emails),
        phones=_build_phones(request.phones),
    )


def apply_request(contact: Contact, request: ContactRequest) -> Contact:
    """Overwrite a contact's fields and replace both entry lists wholesale.

    The owner is left untouched.
    """
    contact.first_name = request.first_name
    contact.last_name = request.last_name
    contact.title = request.title
    contact.emails = _build_emails(request.emails)
    contact.phones = _build_phones(request.phones)
    return contact
