"""
Contact import from uploaded JSON and CSV files.

Each import is all-or-nothing: the file is fully decoded before anything is
written, and the resulting batch is persisted inside a single unit of work.
"""

from uuid import UUID

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from circle.auth.repository import UserRepository
from circle.contacts.csv_parser import CSVParser
from circle.contacts.mapper import to_entity, to_response
from circle.contacts.repository import ContactRepository
from circle.contacts.schemas import ContactRequest, ContactResponse
from circle.shared.database import UnitOfWork
from circle.shared.exceptions import ImportDecodeError, NotFoundError
from circle.shared.logging import get_logger

logger = get_logger(__name__)

_contact_request_list_adapter = TypeAdapter(list[ContactRequest])


class ContactImportService:
    """Creates contacts for a user from an uploaded file."""

    def __init__(
        self,
        session: AsyncSession,
        contact_repository: ContactRepository | None = None,
        user_repository: UserRepository | None = None,
        csv_parser: CSVParser | None = None,
    ) -> None:
        """Initialize import service.

        Args:
            session: Async database session.
            contact_repository: Optional contact repository (for DI).
            user_repository: Optional user repository (for DI).
            csv_parser: Optional CSV parser (for DI).
        """
        self._session = session
        self._contact_repo = contact_repository or ContactRepository(session)
        self._user_repo = user_repository or UserRepository(session)
        self._csv_parser = csv_parser or CSVParser()

    async def import_from_json(self, user_id: UUID, content: bytes) -> list[ContactResponse]:
        """Import contacts from a JSON array of contact payloads.

        Args:
            user_id: Owner of the imported contacts.
            content: Raw JSON file content.

        Returns:
            The persisted contacts, in file order.

        Raises:
            NotFoundError: If the user does not exist.
            ImportDecodeError: If the file is not a valid JSON array of
                contacts. Nothing is persisted.
        """
        logger.info("Importing contacts from JSON", extra={"user_id": str(user_id)})
        await self._require_user(user_id)

        try:
            requests = _contact_request_list_adapter.validate_json(content)
        except PydanticValidationError as e:
            logger.warning(
                "Error importing contacts from JSON",
                extra={"user_id": str(user_id), "error_count": e.error_count()},
            )
            raise ImportDecodeError(
                "Failed to import contacts from JSON",
                details={
                    "errors": e.errors(
                        include_url=False,
                        include_context=False,
                        include_input=False,
                    ),
                },
            ) from e

        return await self._persist(user_id, requests, source="json")

    async def import_from_csv(self, user_id: UUID, content: bytes) -> list[ContactResponse]:
        """Import contacts from a CSV file in the export layout.

        Args:
            user_id: Owner of the imported contacts.
            content: Raw CSV file content.

        Returns:
            The persisted contacts, in file order.

        Raises:
            NotFoundError: If the user does not exist.
            ImportDecodeError: If the CSV is structurally invalid. Nothing is
                persisted.
        """
        logger.info("Importing contacts from CSV", extra={"user_id": str(user_id)})
        await self._require_user(user_id)

        try:
            requests = self._csv_parser.parse(content)
        except ImportDecodeError as e:
            logger.warning(
                "Error importing contacts from CSV",
                extra={"user_id": str(user_id), "error": e.message},
            )
            raise

        return await self._persist(user_id, requests, source="csv")

    async def _require_user(self, user_id: UUID) -> None:
        if not await self._user_repo.exists(user_id):
            raise NotFoundError(
                f"User {user_id} not found",
                details={"user_id": str(user_id)},
            )

    async def _persist(
        self,
        user_id: UUID,
        requests: list[ContactRequest],
        source: str,
    ) -> list[ContactResponse]:
        async with UnitOfWork(self._session):
            contacts = [to_entity(request, user_id) for request in requests]
            saved = await self._contact_repo.save_all(contacts)
            responses = [to_response(c) for c in saved]

        logger.info(
            "Imported contacts",
            extra={"user_id": str(user_id), "source": source, "count": len(responses)},
        )
        return responses
