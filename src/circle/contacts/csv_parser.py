"""
CSV reading and writing for contact import/export.

Column layout (header row required)::

    First Name,Last Name,Title,Emails,Phones

Emails and Phones cells use the inline grammar from
:mod:`circle.contacts.grammar`.
"""

import csv
import io
import re
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError

from circle.contacts.grammar import E, decode_entries, encode_entries
from circle.contacts.models import EmailType, PhoneType
from circle.contacts.schemas import (
    EMAIL_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    ContactEmailRequest,
    ContactPhoneRequest,
    ContactRequest,
    ContactResponse,
)
from circle.shared.exceptions import ImportDecodeError
from circle.shared.logging import get_logger

logger = get_logger(__name__)

CSV_COLUMNS = ("First Name", "Last Name", "Title", "Emails", "Phones")

DEFAULT_EMAIL_TYPE = EmailType.PERSONAL
DEFAULT_PHONE_TYPE = PhoneType.PERSONAL

REQUIRED_HEADERS = {"first_name", "last_name"}
OPTIONAL_HEADERS = {"title", "emails", "phones"}
ALL_HEADERS = REQUIRED_HEADERS | OPTIONAL_HEADERS

# Header aliases for files produced by other tools
HEADER_ALIASES: dict[str, str] = {
    "firstname": "first_name",
    "given_name": "first_name",
    "lastname": "last_name",
    "surname": "last_name",
    "family_name": "last_name",
    "job_title": "title",
    "email": "emails",
    "email_addresses": "emails",
    "phone": "phones",
    "phone_numbers": "phones",
}


def normalize_header(header: str) -> str:
    """Normalize a CSV header to a field name.

    Args:
        header: Raw header string, e.g. ``"First Name"``.

    Returns:
        Normalized header name, e.g. ``"first_name"``.
    """
    h = header.strip().lower()
    h = re.sub(r"[\s\-]+", "_", h)
    h = re.sub(r"__+", "_", h)
    return HEADER_ALIASES.get(h, h)


def _within_length(
    entries: list[tuple[str, E]],
    max_length: int,
    line_number: int,
) -> list[tuple[str, E]]:
    """Drop decoded entries whose value cannot be stored."""
    kept: list[tuple[str, E]] = []
    for value, entry_type in entries:
        if len(value) > max_length:
            logger.debug(
                "Dropping over-length entry",
                extra={
                    "line_number": line_number,
                    "length": len(value),
                    "max_length": max_length,
                },
            )
            continue
        kept.append((value, entry_type))
    return kept


class CSVParser:
    """Parser for contact CSV files."""

    def __init__(
        self,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
    ) -> None:
        """Initialize CSV parser.

        Args:
            delimiter: CSV field delimiter.
            encoding: File encoding.
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def parse(self, content: bytes) -> list[ContactRequest]:
        """Parse CSV content into contact-creation payloads.

        The whole file is read before anything is returned, so a structural
        fault anywhere fails the import as a unit.

        Args:
            content: Raw CSV file content.

        Returns:
            One payload per data row, in file order.

        Raises:
            ImportDecodeError: Undecodable bytes, missing header row or
                required headers, broken quoting, or a row without names.
        """
        try:
            text = content.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ImportDecodeError(f"File encoding error: {e}") from e

        reader = csv.DictReader(
            io.StringIO(text, newline=""),
            delimiter=self.delimiter,
            restval="",
            strict=True,
        )

        try:
            fieldnames = reader.fieldnames
            if not fieldnames:
                raise ImportDecodeError("CSV file is empty or has no headers")

            # First occurrence wins when two headers normalize the same way
            normalized_headers: dict[str, str] = {}
            for h in fieldnames:
                normalized_headers.setdefault(normalize_header(h or ""), h)

            missing_required = REQUIRED_HEADERS - set(normalized_headers)
            if missing_required:
                raise ImportDecodeError(
                    f"Missing required headers: {', '.join(sorted(missing_required))}",
                    details={"headers": list(fieldnames)},
                )

            logger.debug(
                "CSV headers parsed",
                extra={
                    "original_headers": list(fieldnames),
                    "normalized_headers": list(normalized_headers),
                },
            )

            requests: list[ContactRequest] = []
            # Header is line 1
            for line_num, row in enumerate(reader, start=2):
                normalized_row = {
                    norm: (row.get(orig) or "").strip()
                    for norm, orig in normalized_headers.items()
                    if norm in ALL_HEADERS
                }
                requests.append(self._parse_row(line_num, normalized_row))
        except csv.Error as e:
            raise ImportDecodeError(f"Malformed CSV: {e}") from e

        return requests

    def _parse_row(self, line_number: int, row: dict[str, str]) -> ContactRequest:
        """Build a payload from one normalized row.

        Args:
            line_number: Line number in the file.
            row: Normalized, trimmed row data.

        Returns:
            Parsed contact payload.
        """
        emails = _within_length(
            decode_entries(row.get("emails"), DEFAULT_EMAIL_TYPE),
            EMAIL_MAX_LENGTH,
            line_number,
        )
        phones = _within_length(
            decode_entries(row.get("phones"), DEFAULT_PHONE_TYPE),
            PHONE_MAX_LENGTH,
            line_number,
        )

        try:
            return ContactRequest(
                first_name=row.get("first_name", ""),
                last_name=row.get("last_name", ""),
                title=row.get("title") or None,
                emails=[ContactEmailRequest(email=v, type=t) for v, t in emails],
                phones=[ContactPhoneRequest(phone_number=v, type=t) for v, t in phones],
            )
        except PydanticValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            logger.warning(
                "Row parsing error",
                extra={"line_number": line_number, "fields": fields},
            )
            raise ImportDecodeError(
                f"Invalid contact on line {line_number}",
                details={"line_number": line_number, "fields": fields},
            ) from e


def write_contacts_csv(contacts: Iterable[ContactResponse]) -> str:
    """Render contacts as CSV text with the standard header row.

    Args:
        contacts: Contacts in transfer shape.

    Returns:
        CSV text, one row per contact.
    """
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)

    for contact in contacts:
        writer.writerow(
            [
                contact.first_name,
                contact.last_name,
                contact.title or "",
                encode_entries((e.email, e.type) for e in contact.emails),
                encode_entries((p.phone_number, p.type) for p in contact.phones),
            ]
        )

    return buffer.getvalue()
