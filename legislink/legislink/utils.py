"""Small helpers shared across modules."""

import re
from decimal import ROUND_HALF_UP, Decimal

_WHITESPACE_RE = re.compile(r"\s+")


def round_half_up(value: float, places: int = 1) -> float:
    """
    Round to ``places`` decimals with ties going up.

    Works on the exact binary value of ``value``, so 0.25 rounds to 0.3
    where the built-in ``round`` would give 0.2.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def name_key(name: str | None) -> str:
    """Lookup key for a person name: whitespace collapsed, trimmed, lower-cased."""
    return _WHITESPACE_RE.sub(" ", name or "").strip().lower()
