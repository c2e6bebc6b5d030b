"""
Unit tests for the email/phone cell grammar.
"""

import pytest

from circle.contacts.grammar import decode_entries, encode_entries, split_segment
from circle.contacts.models import EmailType, PhoneType


class TestEncodeEntries:
    """Tests for encoding entry lists into a cell."""

    def test_empty_list_encodes_to_empty_string(self):
        assert encode_entries([]) == ""

    def test_single_entry(self):
        assert encode_entries([("jane@work.com", EmailType.WORK)]) == "jane@work.com (WORK)"

    def test_entries_joined_in_order(self):
        cell = encode_entries(
            [
                ("555-0100", PhoneType.HOME),
                ("555-0199", PhoneType.WORK),
            ]
        )
        assert cell == "555-0100 (HOME); 555-0199 (WORK)"

    def test_accepts_generator(self):
        entries = (("a@b.c", t) for t in (EmailType.OTHER, EmailType.PERSONAL))
        assert encode_entries(entries) == "a@b.c (OTHER); a@b.c (PERSONAL)"


class TestDecodeEntries:
    """Tests for decoding a cell into entries."""

    @pytest.mark.parametrize("cell", ["", "   ", None])
    def test_blank_cell_yields_no_entries(self, cell):
        assert decode_entries(cell, EmailType.PERSONAL) == []

    def test_unknown_type_falls_back_to_default(self):
        assert decode_entries("foo (BOGUS)", EmailType.PERSONAL) == [
            ("foo", EmailType.PERSONAL)
        ]

    def test_segment_without_type_is_dropped(self):
        assert decode_entries("not-well-formed", EmailType.PERSONAL) == []

    def test_malformed_middle_segment_is_dropped(self):
        assert decode_entries("a (WORK); bad; c (HOME)", PhoneType.PERSONAL) == [
            ("a", PhoneType.WORK),
            ("c", PhoneType.HOME),
        ]

    def test_type_tag_is_trimmed_and_case_insensitive(self):
        assert decode_entries("555-0100 ( home )", PhoneType.PERSONAL) == [
            ("555-0100", PhoneType.HOME)
        ]

    def test_tag_valid_for_phones_only_defaults_for_emails(self):
        assert decode_entries("x@y.z (HOME)", EmailType.OTHER) == [("x@y.z", EmailType.OTHER)]

    def test_value_with_parentheses_splits_on_last_pair(self):
        assert decode_entries("Dr. (Jr) Smith (WORK)", EmailType.PERSONAL) == [
            ("Dr. (Jr) Smith", EmailType.WORK)
        ]

    def test_value_without_spacing_before_type(self):
        assert decode_entries("a@b.c(WORK)", EmailType.PERSONAL) == [("a@b.c", EmailType.WORK)]

    def test_empty_segments_are_skipped(self):
        assert decode_entries("; a@b.c (WORK);;", EmailType.PERSONAL) == [
            ("a@b.c", EmailType.WORK)
        ]

    def test_text_after_type_is_not_a_suffix(self):
        assert decode_entries("a@b.c (WORK) trailing", EmailType.PERSONAL) == []

    def test_missing_value_is_dropped(self):
        assert decode_entries("(WORK)", EmailType.PERSONAL) == []

    def test_empty_type_token_is_dropped(self):
        assert decode_entries("a@b.c ()", EmailType.PERSONAL) == []

    def test_round_trip_preserves_values_and_types(self):
        entries = [
            ("+1 (415) 555-0100", PhoneType.WORK),
            ("555 0101", PhoneType.HOME),
            ("0044 20 7946 0000", PhoneType.PERSONAL),
            ("ext. 12", PhoneType.OTHER),
        ]
        assert decode_entries(encode_entries(entries), PhoneType.PERSONAL) == entries


class TestSplitSegment:
    """Tests for the two-pass segment split."""

    def test_well_formed(self):
        assert split_segment(" jane@work.com (WORK) ") == ("jane@work.com", "WORK")

    def test_nested_close_paren_in_token_is_rejected(self):
        assert split_segment("a (b)c)") is None

    def test_no_open_paren(self):
        assert split_segment("abc)") is None
