"""
Contact API router: CRUD plus JSON/CSV import and export.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from circle.auth.middleware import CurrentUser, get_current_user
from circle.config import Settings, get_settings
from circle.contacts.csv_parser import CSVParser
from circle.contacts.export_service import ContactExportService
from circle.contacts.import_service import ContactImportService
from circle.contacts.schemas import ContactRequest, ContactResponse
from circle.contacts.service import ContactService
from circle.shared.database import get_db_session
from circle.shared.exceptions import ValidationError
from circle.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def get_contact_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ContactService:
    """Dependency for contact service."""
    return ContactService(session=session)


def get_export_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ContactExportService:
    """Dependency for export service."""
    return ContactExportService(session=session)


def get_import_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ContactImportService:
    """Dependency for import service."""
    return ContactImportService(
        session=session,
        csv_parser=CSVParser(encoding=settings.csv_encoding),
    )


async def _read_upload(file: UploadFile, settings: Settings) -> bytes:
    content = await file.read()
    if not content:
        raise ValidationError("File is empty")
    if len(content) > settings.import_max_bytes:
        raise ValidationError(
            "File is too large",
            details={"max_bytes": settings.import_max_bytes, "size": len(content)},
        )
    return content


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/export/json",
    summary="Export contacts as JSON",
    response_class=Response,
)
async def export_contacts_json(
    service: Annotated[ContactExportService, Depends(get_export_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Download all of the caller's contacts as a JSON array."""
    content = await service.export_as_json(current_user.id)
    return _attachment(content, "application/json", "contacts.json")


@router.get(
    "/export/csv",
    summary="Export contacts as CSV",
    response_class=Response,
)
async def export_contacts_csv(
    service: Annotated[ContactExportService, Depends(get_export_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Download all of the caller's contacts as CSV."""
    content = await service.export_as_csv(current_user.id)
    return _attachment(content, "text/csv", "contacts.csv")


@router.post(
    "/import/json",
    response_model=list[ContactResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Import contacts from JSON",
)
async def import_contacts_json(
    file: Annotated[UploadFile, File(description="JSON array of contacts")],
    service: Annotated[ContactImportService, Depends(get_import_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> list[ContactResponse]:
    """Create contacts from an uploaded JSON file.

    The import is atomic: either every contact in the file is created or,
    on any error, none is.

    Raises:
        404: User not found.
        400: Empty, oversized or malformed file.
    """
    logger.info(
        "JSON import started",
        extra={
            "user_id": str(current_user.id),
            "upload_filename": file.filename,
            "content_type": file.content_type,
        },
    )
    content = await _read_upload(file, settings)
    return await service.import_from_json(current_user.id, content)


@router.post(
    "/import/csv",
    response_model=list[ContactResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Import contacts from CSV",
)
async def import_contacts_csv(
    file: Annotated[UploadFile, File(description="CSV file in the export layout")],
    service: Annotated[ContactImportService, Depends(get_import_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> list[ContactResponse]:
    """Create contacts from an uploaded CSV file.

    Expected columns: First Name, Last Name, Title, Emails, Phones (header
    names are matched case-insensitively). Emails/Phones cells use
    ``value (TYPE); value (TYPE)``.

    Raises:
        404: User not found.
        400: Empty, oversized or malformed file.
    """
    logger.info(
        "CSV import started",
        extra={
            "user_id": str(current_user.id),
            "upload_filename": file.filename,
            "content_type": file.content_type,
        },
    )
    content = await _read_upload(file, settings)
    return await service.import_from_csv(current_user.id, content)


@router.post(
    "",
    response_model=ContactResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create contact",
)
async def create_contact(
    request: ContactRequest,
    service: Annotated[ContactService, Depends(get_contact_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ContactResponse:
    return await service.create_contact(current_user.id, request)


@router.get(
    "",
    response_model=list[ContactResponse],
    summary="List contacts",
)
async def list_contacts(
    service: Annotated[ContactService, Depends(get_contact_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[ContactResponse]:
    return await service.list_contacts(current_user.id)


@router.get(
    "/search",
    response_model=list[ContactResponse],
    summary="Search contacts by name",
)
async def search_contacts(
    query: Annotated[str, Query(min_length=1, max_length=100, description="Name fragment")],
    service: Annotated[ContactService, Depends(get_contact_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[ContactResponse]:
    """Find the caller's contacts whose first or last name contains ``query``."""
    return await service.search_contacts(current_user.id, query)


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    summary="Get contact",
)
async def get_contact(
    contact_id: int,
    service: Annotated[ContactService, Depends(get_contact_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ContactResponse:
    return await service.get_contact(current_user.id, contact_id)


@router.put(
    "/{contact_id}",
    response_model=ContactResponse,
    summary="Replace contact",
)
async def update_contact(
    contact_id: int,
    request: ContactRequest,
    service: Annotated[ContactService, Depends(get_contact_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ContactResponse:
    """Replace a contact, including its full email and phone lists."""
    return await service.update_contact(current_user.id, contact_id, request)


@router.delete(
    "/{contact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete contact",
)
async def delete_contact(
    contact_id: int,
    service: Annotated[ContactService, Depends(get_contact_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    await service.delete_contact(current_user.id, contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
