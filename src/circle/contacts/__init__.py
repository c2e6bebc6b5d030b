from circle.contacts.models import Contact, ContactEmail, ContactPhone, EmailType, PhoneType

__all__ = ["Contact", "ContactEmail", "ContactPhone", "EmailType", "PhoneType"]
