"""
Contact export to JSON and CSV.
"""

import csv
from uuid import UUID

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError
from sqlalchemy.ext.asyncio import AsyncSession

from circle.contacts.csv_parser import write_contacts_csv
from circle.contacts.mapper import to_response
from circle.contacts.repository import ContactRepository
from circle.contacts.schemas import ContactResponse
from circle.shared.database import UnitOfWork
from circle.shared.exceptions import ExportError
from circle.shared.logging import get_logger

logger = get_logger(__name__)

_contact_list_adapter = TypeAdapter(list[ContactResponse])


class ContactExportService:
    """Serializes a user's contacts for download."""

    def __init__(
        self,
        session: AsyncSession,
        contact_repository: ContactRepository | None = None,
    ) -> None:
        """Initialize export service.

        Args:
            session: Async database session.
            contact_repository: Optional contact repository (for DI).
        """
        self._session = session
        self._contact_repo = contact_repository or ContactRepository(session)

    async def _load(self, user_id: UUID) -> list[ContactResponse]:
        async with UnitOfWork(self._session, read_only=True):
            contacts = await self._contact_repo.list_by_user(user_id)
            return [to_response(c) for c in contacts]

    async def export_as_json(self, user_id: UUID) -> bytes:
        """Export all of a user's contacts as a JSON array.

        Args:
            user_id: Owner UUID.

        Returns:
            UTF-8 JSON bytes with camelCase keys and ISO-8601 timestamps.

        Raises:
            ExportError: If serialization fails.
        """
        logger.info("Exporting contacts as JSON", extra={"user_id": str(user_id)})
        contacts = await self._load(user_id)

        try:
            payload = _contact_list_adapter.dump_json(contacts, by_alias=True)
        except PydanticSerializationError as e:
            logger.error(
                "Error exporting contacts as JSON",
                extra={"user_id": str(user_id)},
                exc_info=True,
            )
            raise ExportError("Failed to export contacts as JSON") from e

        logger.info(
            "Exported contacts as JSON",
            extra={"user_id": str(user_id), "count": len(contacts)},
        )
        return payload

    async def export_as_csv(self, user_id: UUID) -> bytes:
        """Export all of a user's contacts as CSV.

        Args:
            user_id: Owner UUID.

        Returns:
            UTF-8 CSV bytes with a ``First Name,Last Name,Title,Emails,Phones``
            header row.

        Raises:
            ExportError: If the CSV cannot be written or encoded.
        """
        logger.info("Exporting contacts as CSV", extra={"user_id": str(user_id)})
        contacts = await self._load(user_id)

        try:
            payload = write_contacts_csv(contacts).encode("utf-8")
        except (csv.Error, UnicodeEncodeError) as e:
            logger.error(
                "Error exporting contacts as CSV",
                extra={"user_id": str(user_id)},
                exc_info=True,
            )
            raise ExportError("Failed to export contacts as CSV") from e

        logger.info(
            "Exported contacts as CSV",
            extra={"user_id": str(user_id), "count": len(contacts)},
        )
        return payload
