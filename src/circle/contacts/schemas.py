"""
Pydantic schemas for contact management.

Field names are snake_case in Python and camelCase on the wire
(``firstName``, ``phoneNumber``, ``createdAt`` ...). Both spellings are
accepted on input.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from circle.contacts.models import EmailType, PhoneType

EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 50


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ContactEmailRequest(CamelModel):
    """Email entry in a contact-creation payload."""

    email: str = Field(
        ...,
        min_length=1,
        max_length=EMAIL_MAX_LENGTH,
        description="Email address",
    )
    type: EmailType = Field(..., description="Email type")


class ContactPhoneRequest(CamelModel):
    """Phone entry in a contact-creation payload."""

    phone_number: str = Field(
        ...,
        min_length=1,
        max_length=PHONE_MAX_LENGTH,
        description="Phone number",
    )
    type: PhoneType = Field(..., description="Phone type")


class ContactRequest(CamelModel):
    """Schema for creating or replacing a contact.

    Unknown keys (including any owner or id fields in uploaded files) are
    ignored; the owner always comes from the authenticated caller.
    """

    first_name: str = Field(..., min_length=1, max_length=100, description="First name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name")
    title: str | None = Field(default=None, max_length=255, description="Job title")
    emails: list[ContactEmailRequest] | None = Field(
        default=None,
        description="Email addresses, in display order",
    )
    phones: list[ContactPhoneRequest] | None = Field(
        default=None,
        description="Phone numbers, in display order",
    )


class ContactEmailResponse(CamelModel):
    """Email entry of a persisted contact."""

    id: int | None = None
    email: str
    type: EmailType


class ContactPhoneResponse(CamelModel):
    """Phone entry of a persisted contact."""

    id: int | None = None
    phone_number: str
    type: PhoneType


class ContactResponse(CamelModel):
    """Transfer shape of a contact, used by the API and by JSON export."""

    id: int | None = None
    first_name: str
    last_name: str
    title: str | None = None
    emails: list[ContactEmailResponse] = Field(default_factory=list)
    phones: list[ContactPhoneResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
