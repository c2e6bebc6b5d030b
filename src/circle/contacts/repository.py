"""
Contact repository for database operations.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from circle.contacts.models import Contact


class ContactRepository:
    """Repository for contact database operations.

    Methods flush but never commit; the caller's unit of work owns the
    transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async database session.
        """
        self._session = session

    async def save(self, contact: Contact) -> Contact:
        """Stage and flush a single contact.

        Args:
            contact: New or modified contact.

        Returns:
            The contact with generated IDs populated.
        """
        self._session.add(contact)
        await self._session.flush()
        return contact

    async def save_all(self, contacts: list[Contact]) -> list[Contact]:
        """Stage and flush a batch of contacts.

        Args:
            contacts: Contacts to persist, with their emails and phones.

        Returns:
            The same contacts, in the same order, with generated IDs.
        """
        if not contacts:
            return []

        self._session.add_all(contacts)
        await self._session.flush()
        return contacts

    async def get_by_id(self, contact_id: int) -> Contact | None:
        """Get a contact by ID.

        Args:
            contact_id: Contact ID.

        Returns:
            Contact if found, None otherwise.
        """
        stmt = select(Contact).where(Contact.id == contact_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: UUID) -> Sequence[Contact]:
        """Get every contact owned by a user, oldest first.

        Args:
            user_id: Owner UUID.

        Returns:
            Contacts with emails and phones loaded.
        """
        stmt = select(Contact).where(Contact.user_id == user_id).order_by(Contact.id)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def search_by_user(self, user_id: UUID, query: str) -> Sequence[Contact]:
        """Find a user's contacts whose first or last name contains ``query``.

        Matching is case-insensitive; ``%`` and ``_`` in the query are literal.

        Args:
            user_id: Owner UUID.
            query: Substring to look for.

        Returns:
            Matching contacts, oldest first.
        """
        stmt = (
            select(Contact)
            .where(
                Contact.user_id == user_id,
                or_(
                    Contact.first_name.icontains(query, autoescape=True),
                    Contact.last_name.icontains(query, autoescape=True),
                ),
            )
            .order_by(Contact.id)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def delete(self, contact: Contact) -> None:
        """Delete a contact together with its emails and phones."""
        await self._session.delete(contact)
        await self._session.flush()
