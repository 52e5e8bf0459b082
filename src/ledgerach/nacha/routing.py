"""ABA routing number validation (NACHA MOD-10 checksum)."""

from __future__ import annotations

import re

_ROUTING_RE = re.compile(r"[0-9]{9}")
_WEIGHTS = (3, 7, 1, 3, 7, 1, 3, 7, 1)


def validate_routing_number(routing: object) -> bool:
    """Return True if ``routing`` is 9 ASCII digits with a valid check digit.

    Never raises: anything that is not a 9-digit string is simply invalid.
    """
    if not isinstance(routing, str) or not _ROUTING_RE.fullmatch(routing):
        return False
    total = sum(int(d) * w for d, w in zip(routing, _WEIGHTS))
    return total % 10 == 0


def routing_check_digit(first_eight: str) -> str:
    """Compute the ninth (check) digit for an 8-digit routing prefix."""
    if not re.fullmatch(r"[0-9]{8}", first_eight):
        raise ValueError(f"Expected 8 digits, got {first_eight!r}")
    total = sum(int(d) * w for d, w in zip(first_eight, _WEIGHTS))
    return str((10 - total % 10) % 10)
