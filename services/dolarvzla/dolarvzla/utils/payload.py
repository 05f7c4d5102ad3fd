from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

# Bolivares per unit above this are treated as garbage from upstream
MAX_RATE = Decimal("1e9")


def _dig(data: Any, path: str) -> Any:
    cur = data
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
    return cur


def first_defined(data: Any, paths: Sequence[str]) -> Any:
    """
    Return the first value found under one of the dotted `paths`, in order.
    None and empty strings count as missing, so "bcv.usd" is only consulted
    when "usd" is absent.
    """
    for path in paths:
        val = _dig(data, path)
        if val is not None and val != "":
            return val
    return None


def to_decimal(val: Any) -> Optional[Decimal]:
    """
    Loose numeric cast for upstream payloads: accepts numbers and strings
    such as "36,85" or " 40.1 ". Returns None for anything non-numeric.
    """
    if val is None or isinstance(val, bool):
        return None
    s = str(val).strip().replace(",", ".")
    if not s:
        return None
    try:
        d = Decimal(s)
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def positive_decimal(val: Any) -> Optional[Decimal]:
    """Positive value no larger than MAX_RATE, else None."""
    d = to_decimal(val)
    if d is None:
        return None
    return plausible_rate(d)


def plausible_rate(d: Decimal) -> Optional[Decimal]:
    if d <= 0 or d > MAX_RATE:
        return None
    return d
