"""
Inline grammar for flattening email/phone lists into one CSV cell.

A cell holds entries of the form ``<value> (<TYPE>)`` separated by ``"; "``::

    jane@work.com (WORK); jane@home.org (PERSONAL)

Decoding is permissive: segments that do not end in a parenthesized type are
dropped and unknown type tags fall back to a default, so hand-edited files
still import.
"""

from enum import Enum
from typing import Iterable, TypeVar

from circle.shared.logging import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

ENTRY_SEPARATOR = ";"
JOINER = "; "


def encode_entries(entries: Iterable[tuple[str, Enum]]) -> str:
    """Encode ``(value, type)`` pairs into a single cell.

    Args:
        entries: Pairs in display order.

    Returns:
        The joined cell; an empty string for no entries.
    """
    return JOINER.join(f"{value} ({entry_type.name})" for value, entry_type in entries)


def split_segment(segment: str) -> tuple[str, str] | None:
    """Split one segment into its value and raw type token.

    The type token is the text inside the last parenthesis pair, which must
    close the segment. Everything before that pair is the value, so values
    may themselves contain parentheses: ``"Dr. (Jr) Smith (WORK)"`` splits
    into ``("Dr. (Jr) Smith", "WORK")``.

    Returns:
        ``(value, token)`` or None when the segment is not well formed.
    """
    segment = segment.strip()
    if not segment.endswith(")"):
        return None

    open_idx = segment.rfind("(")
    if open_idx <= 0:
        return None

    value = segment[:open_idx].strip()
    token = segment[open_idx + 1 : -1]
    if not value or not token.strip() or ")" in token:
        return None

    return value, token


def decode_entries(cell: str | None, default_type: E) -> list[tuple[str, E]]:
    """Decode a cell produced by :func:`encode_entries`.

    Args:
        cell: Raw cell text (may be None or blank).
        default_type: Member used for unrecognized type tags; its enum class
            is the one tags are looked up in.

    Returns:
        ``(value, type)`` pairs in cell order.
    """
    if cell is None or not cell.strip():
        return []

    enum_cls = type(default_type)
    entries: list[tuple[str, E]] = []

    for raw in cell.split(ENTRY_SEPARATOR):
        if not raw.strip():
            continue

        parsed = split_segment(raw)
        if parsed is None:
            logger.debug("Dropping malformed segment", extra={"segment": raw.strip()})
            continue

        value, token = parsed
        tag = token.strip().upper()
        entry_type = enum_cls.__members__.get(tag)
        if entry_type is None:
            logger.debug(
                "Unknown type tag, using default",
                extra={"tag": tag, "default": default_type.name},
            )
            entry_type = default_type

        entries.append((value, entry_type))

    return entries
