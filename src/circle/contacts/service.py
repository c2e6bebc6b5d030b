"""
Contact service for owner-scoped CRUD.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from circle.auth.repository import UserRepository
from circle.contacts.mapper import apply_request, to_entity, to_response
from circle.contacts.models import Contact
from circle.contacts.repository import ContactRepository
from circle.contacts.schemas import ContactRequest, ContactResponse
from circle.shared.database import UnitOfWork
from circle.shared.exceptions import AuthorizationError, NotFoundError
from circle.shared.logging import get_logger

logger = get_logger(__name__)


class ContactService:
    """Service for contact management operations."""

    def __init__(
        self,
        session: AsyncSession,
        contact_repository: ContactRepository | None = None,
        user_repository: UserRepository | None = None,
    ) -> None:
        """Initialize contact service.

        Args:
            session: Async database session.
            contact_repository: Optional contact repository (for DI).
            user_repository: Optional user repository (for DI).
        """
        self._session = session
        self._contact_repo = contact_repository or ContactRepository(session)
        self._user_repo = user_repository or UserRepository(session)

    async def create_contact(self, user_id: UUID, request: ContactRequest) -> ContactResponse:
        """Create a contact with its emails and phones.

        Raises:
            NotFoundError: If the user does not exist.
        """
        if not await self._user_repo.exists(user_id):
            raise NotFoundError(f"User {user_id} not found", details={"user_id": str(user_id)})

        async with UnitOfWork(self._session):
            contact = await self._contact_repo.save(to_entity(request, user_id))
            response = to_response(contact)

        logger.info(
            "Contact created",
            extra={"user_id": str(user_id), "contact_id": response.id},
        )
        return response

    async def list_contacts(self, user_id: UUID) -> list[ContactResponse]:
        """Get all contacts owned by a user."""
        async with UnitOfWork(self._session, read_only=True):
            contacts = await self._contact_repo.list_by_user(user_id)
            return [to_response(c) for c in contacts]

    async def search_contacts(self, user_id: UUID, query: str) -> list[ContactResponse]:
        """Get a user's contacts whose first or last name contains ``query``."""
        async with UnitOfWork(self._session, read_only=True):
            contacts = await self._contact_repo.search_by_user(user_id, query.strip())
            return [to_response(c) for c in contacts]

    async def get_contact(self, user_id: UUID, contact_id: int) -> ContactResponse:
        """Get a single contact.

        Raises:
            NotFoundError: If the contact does not exist.
            AuthorizationError: If the contact belongs to another user.
        """
        async with UnitOfWork(self._session, read_only=True):
            contact = await self._get_owned(user_id, contact_id, action="view")
            return to_response(contact)

    async def update_contact(
        self,
        user_id: UUID,
        contact_id: int,
        request: ContactRequest,
    ) -> ContactResponse:
        """Replace a contact's fields and its full email/phone lists.

        Raises:
            NotFoundError: If the contact does not exist.
            AuthorizationError: If the contact belongs to another user.
        """
        async with UnitOfWork(self._session):
            contact = await self._get_owned(user_id, contact_id, action="update")
            apply_request(contact, request)
            await self._contact_repo.save(contact)
            response = to_response(contact)

        logger.info(
            "Contact updated",
            extra={"user_id": str(user_id), "contact_id": contact_id},
        )
        return response

    async def delete_contact(self, user_id: UUID, contact_id: int) -> None:
        """Delete a contact together with its emails and phones.

        Raises:
            NotFoundError: If the contact does not exist.
            AuthorizationError: If the contact belongs to another user.
        """
        async with UnitOfWork(self._session):
            contact = await self._get_owned(user_id, contact_id, action="delete")
            await self._contact_repo.delete(contact)

        logger.info(
            "Contact deleted",
            extra={"user_id": str(user_id), "contact_id": contact_id},
        )

    async def _get_owned(self, user_id: UUID, contact_id: int, action: str) -> Contact:
        contact = await self._contact_repo.get_by_id(contact_id)
        if contact is None:
            raise NotFoundError(
                f"Contact {contact_id} not found",
                details={"contact_id": contact_id},
            )

        if contact.user_id != user_id:
            logger.warning(
                "Contact access denied",
                extra={"user_id": str(user_id), "contact_id": contact_id, "action": action},
            )
            raise AuthorizationError(f"You don't have permission to {action} this contact")

        return contact
