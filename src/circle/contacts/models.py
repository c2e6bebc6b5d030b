"""
SQLAlchemy models for contacts.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from sqlalchemy import (
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Uuid,
    func,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from circle.shared.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmailType(str, Enum):
    """Kind of email address."""

    WORK = "WORK"
    PERSONAL = "PERSONAL"
    OTHER = "OTHER"


class PhoneType(str, Enum):
    """Kind of phone number."""

    WORK = "WORK"
    HOME = "HOME"
    PERSONAL = "PERSONAL"
    OTHER = "OTHER"


class ContactEmail(Base):
    """Email address owned by exactly one contact."""

    __tablename__ = "contact_emails"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contact_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[EmailType] = mapped_column(
        SQLEnum(EmailType, name="email_type"),
        nullable=False,
        default=EmailType.PERSONAL,
    )

    def __repr__(self) -> str:
        return f"<ContactEmail(id={self.id}, email={self.email}, type={self.type})>"


class ContactPhone(Base):
    """Phone number owned by exactly one contact."""

    __tablename__ = "contact_phones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contact_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[PhoneType] = mapped_column(
        SQLEnum(PhoneType, name="phone_type"),
        nullable=False,
        default=PhoneType.PERSONAL,
    )

    def __repr__(self) -> str:
        return f"<ContactPhone(id={self.id}, phone={self.phone_number}, type={self.type})>"


class Contact(Base):
    """A person record owned by one user.

    Emails and phones are kept as position-indexed lists owned by the contact;
    replacing a list deletes the entries that are no longer in it.
    """

    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    # Relationships
    emails: Mapped[list[ContactEmail]] = relationship(
        ContactEmail,
        order_by=ContactEmail.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    phones: Mapped[list[ContactPhone]] = relationship(
        ContactPhone,
        order_by=ContactPhone.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, name={self.first_name} {self.last_name})>"
