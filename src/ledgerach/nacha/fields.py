"""Fixed-width NACHA field formatting.

Every record is assembled through :func:`assemble_record`, so the 94-character
invariant is enforced here and nowhere else.
"""

from __future__ import annotations

from datetime import date, datetime

from ledgerach.core.exceptions import FieldOverflowError, RecordLengthError

RECORD_SIZE = 94
BLOCKING_FACTOR = 10
FILLER_RECORD = "9" * RECORD_SIZE


def numeric(value: int | str, width: int) -> str:
    """Right-justify and zero-fill.

    Overflow is an internal error: truncating a number would change an
    amount, count or hash.
    """
    text = str(value)
    if not text.isascii() or not text.isdigit():
        raise FieldOverflowError(f"Numeric field expects digits, got {value!r}")
    if len(text) > width:
        raise FieldOverflowError(f"Value {value!r} does not fit in {width} digits")
    return text.rjust(width, "0")


def alpha(value: object, width: int) -> str:
    """Upper-case, left-justify, space-fill and silently truncate."""
    text = "" if value is None else str(value)
    text = "".join(ch if " " <= ch <= "~" else " " for ch in text.upper())
    return text[:width].ljust(width)


def blank(width: int) -> str:
    return " " * width


def yymmdd(value: date) -> str:
    return value.strftime("%y%m%d")


def hhmm(value: datetime) -> str:
    return value.strftime("%H%M")


def assemble_record(*parts: str) -> str:
    """Join pre-formatted fields into one record, enforcing the record size."""
    record = "".join(parts)
    if len(record) != RECORD_SIZE:
        raise RecordLengthError(record[:1], len(record))
    return record


def block_count(record_count: int) -> int:
    """Number of 10-record blocks needed to hold ``record_count`` records."""
    return -(-record_count // BLOCKING_FACTOR)


def filler_records(record_count: int) -> list[str]:
    """'9' filler lines padding ``record_count`` up to a multiple of 10."""
    return [FILLER_RECORD] * (block_count(record_count) * BLOCKING_FACTOR - record_count)
