"""ID and change-token generation."""

from __future__ import annotations

import itertools
import time
from uuid import uuid4

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_sequence = itertools.count(1)


def new_id() -> str:
    """Generate a random hex identifier for inquiry records."""
    return uuid4().hex


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding requires a non-negative integer")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def new_change_token() -> str:
    """Opaque token that differs on every call within this process.

    Epoch milliseconds in base 36, suffixed with a monotonic counter so two
    refreshes landing in the same millisecond still get distinct tokens.
    """
    return f"{to_base36(time.time_ns() // 1_000_000)}-{to_base36(next(_sequence))}"
