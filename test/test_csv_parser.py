"""
Unit tests for contact CSV reading and writing.
"""

import pytest

from circle.contacts.csv_parser import CSVParser, normalize_header, write_contacts_csv
from circle.contacts.models import EmailType, PhoneType
from circle.contacts.schemas import (
    ContactEmailResponse,
    ContactPhoneResponse,
    ContactResponse,
)
from circle.shared.exceptions import ImportDecodeError


class TestNormalizeHeader:
    """Tests for header normalization."""

    def test_lowercase_and_spaces(self):
        assert normalize_header("First Name") == "first_name"
        assert normalize_header("LAST NAME") == "last_name"
        assert normalize_header("  Title  ") == "title"

    def test_hyphen_to_underscore(self):
        assert normalize_header("first-name") == "first_name"

    def test_alias_mapping(self):
        assert normalize_header("FirstName") == "first_name"
        assert normalize_header("Surname") == "last_name"
        assert normalize_header("Email") == "emails"
        assert normalize_header("Phone Numbers") == "phones"


class TestCSVParser:
    """Tests for parsing uploaded CSV files."""

    @pytest.fixture
    def parser(self) -> CSVParser:
        return CSVParser()

    def test_parses_export_layout(self, parser: CSVParser):
        content = (
            b"First Name,Last Name,Title,Emails,Phones\r\n"
            b'Jane,Doe,Engineer,"jane@work.com (WORK); jane@home.org (PERSONAL)",555-0100 (HOME)\r\n'
        )

        [row] = parser.parse(content)

        assert row.first_name == "Jane"
        assert row.last_name == "Doe"
        assert row.title == "Engineer"
        assert [(e.email, e.type) for e in row.emails] == [
            ("jane@work.com", EmailType.WORK),
            ("jane@home.org", EmailType.PERSONAL),
        ]
        assert [(p.phone_number, p.type) for p in row.phones] == [("555-0100", PhoneType.HOME)]

    def test_mixed_case_headers(self, parser: CSVParser):
        content = (
            b"first name,Last Name,TITLE,emails,Phones\n"
            b"Ada,Lovelace,Countess,ada@math.org (OTHER),555-0101 (WORK)\n"
        )

        [row] = parser.parse(content)

        assert row.first_name == "Ada"
        assert row.last_name == "Lovelace"
        assert row.title == "Countess"
        assert row.emails[0].email == "ada@math.org"
        assert row.emails[0].type == EmailType.OTHER
        assert row.phones[0].type == PhoneType.WORK

    def test_cells_are_trimmed_and_empty_title_is_absent(self, parser: CSVParser):
        content = b"First Name,Last Name,Title,Emails,Phones\n  Ada ,  Lovelace ,   ,,\n"

        [row] = parser.parse(content)

        assert row.first_name == "Ada"
        assert row.last_name == "Lovelace"
        assert row.title is None
        assert row.emails == []
        assert row.phones == []

    def test_unknown_type_tag_degrades_to_personal(self, parser: CSVParser):
        content = b"First Name,Last Name,Emails,Phones\nA,B,a@b.c (FAX),555 (PAGER); oops\n"

        [row] = parser.parse(content)

        assert [(e.email, e.type) for e in row.emails] == [("a@b.c", EmailType.PERSONAL)]
        assert [(p.phone_number, p.type) for p in row.phones] == [("555", PhoneType.PERSONAL)]

    def test_extra_columns_are_ignored(self, parser: CSVParser):
        content = b"First Name,Last Name,Owner,Notes\nA,B,someone-else,hello\n"

        [row] = parser.parse(content)

        assert row.first_name == "A"
        assert "owner" not in row.model_dump()

    def test_utf8_bom_and_non_ascii(self, parser: CSVParser):
        content = "First Name,Last Name\nJosé,Müller\n".encode("utf-8-sig")

        [row] = parser.parse(content)

        assert row.first_name == "José"
        assert row.last_name == "Müller"

    def test_preserves_row_order(self, parser: CSVParser):
        content = b"First Name,Last Name\nA,One\nB,Two\nC,Three\n"
        assert [r.last_name for r in parser.parse(content)] == ["One", "Two", "Three"]

    def test_header_only_yields_no_rows(self, parser: CSVParser):
        assert parser.parse(b"First Name,Last Name,Title,Emails,Phones\n") == []

    def test_empty_content_is_rejected(self, parser: CSVParser):
        with pytest.raises(ImportDecodeError) as exc_info:
            parser.parse(b"")
        assert "no headers" in exc_info.value.message

    def test_missing_required_header_is_rejected(self, parser: CSVParser):
        with pytest.raises(ImportDecodeError) as exc_info:
            parser.parse(b"First Name,Title\nA,B\n")
        assert "last_name" in exc_info.value.message

    def test_broken_quoting_is_rejected(self, parser: CSVParser):
        content = b'First Name,Last Name\n"unterminated,Doe\n'
        with pytest.raises(ImportDecodeError):
            parser.parse(content)

    def test_invalid_encoding_is_rejected(self, parser: CSVParser):
        with pytest.raises(ImportDecodeError) as exc_info:
            parser.parse(b"First Name,Last Name\n\xff\xfe,\x80\n")
        assert exc_info.value.code == "DECODE_ERROR"

    def test_row_without_name_is_rejected_with_line_number(self, parser: CSVParser):
        content = b"First Name,Last Name\nA,B\n,C\n"
        with pytest.raises(ImportDecodeError) as exc_info:
            parser.parse(content)
        assert exc_info.value.details["line_number"] == 3

    def test_over_length_entries_are_dropped(self, parser: CSVParser):
        long_phone = "1" * 60
        long_email = "a" * 250 + "@b.com"
        content = (
            "First Name,Last Name,Emails,Phones\n"
            f'A,B,"{long_email} (WORK); a@b.c (HOME)","{long_phone} (WORK); 555-0100 (HOME)"\n'
            "C,D,,\n"
        ).encode()

        first, second = parser.parse(content)

        assert [(e.email, e.type) for e in first.emails] == [("a@b.c", EmailType.PERSONAL)]
        assert [(p.phone_number, p.type) for p in first.phones] == [("555-0100", PhoneType.HOME)]
        assert second.last_name == "D"

    def test_custom_delimiter(self):
        parser = CSVParser(delimiter=";")
        [row] = parser.parse(b"First Name;Last Name;Emails\nA;B;\"a@b.c (WORK); d@e.f (OTHER)\"\n")
        assert len(row.emails) == 2


class TestWriteContactsCSV:
    """Tests for rendering contacts as CSV."""

    def test_header_and_rows(self):
        contacts = [
            ContactResponse(
                id=1,
                first_name="Jane",
                last_name="Doe",
                title="Engineer",
                emails=[
                    ContactEmailResponse(email="jane@work.com", type=EmailType.WORK),
                    ContactEmailResponse(email="jane@home.org", type=EmailType.PERSONAL),
                ],
                phones=[ContactPhoneResponse(phone_number="555-0100", type=PhoneType.HOME)],
            ),
            ContactResponse(id=2, first_name="John", last_name="Smith", title=None),
        ]

        lines = write_contacts_csv(contacts).splitlines()

        assert lines[0] == "First Name,Last Name,Title,Emails,Phones"
        assert lines[1] == (
            "Jane,Doe,Engineer,jane@work.com (WORK); jane@home.org (PERSONAL),555-0100 (HOME)"
        )
        assert lines[2] == "John,Smith,,,"

    def test_null_title_is_never_written_as_text(self):
        text = write_contacts_csv([ContactResponse(first_name="A", last_name="B")])
        assert "None" not in text
        assert "null" not in text

    def test_values_with_commas_are_quoted(self):
        text = write_contacts_csv(
            [ContactResponse(first_name="A", last_name="B", title="VP, Sales")]
        )
        assert '"VP, Sales"' in text
