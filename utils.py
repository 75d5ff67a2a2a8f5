"""
Utility functions for GroupLedger
"""
from __future__ import annotations
import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from config import DATE_FORMAT, MONEY_EPSILON
from errors import InvalidInputError

CENT = Decimal("0.01")


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), DATE_FORMAT).date()


def in_date_range(s: str, start: Optional[date], end: Optional[date]) -> bool:
    """Inclusive date window check; undated records only pass an unbounded window"""
    if start is None and end is None:
        return True
    if not s:
        return False
    d = parse_date(s)
    if start and d < start:
        return False
    if end and d > end:
        return False
    return True


def ensure_finite(value: float, what: str = "amount") -> float:
    """Return value as float, raising InvalidInputError for NaN/inf or non-numbers"""
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{what} is not a number: {value!r}") from None
    if not math.isfinite(v):
        raise InvalidInputError(f"{what} must be finite, got {value!r}")
    return v


def round2(x: float) -> float:
    """
    Round a money value to cents.
    Ties go away from zero (Decimal ROUND_HALF_UP on the float's shortest repr),
    and -0.0 comes back as 0.0.
    """
    x = ensure_finite(x)
    r = float(Decimal(repr(x)).quantize(CENT, rounding=ROUND_HALF_UP))
    return r if r != 0 else 0.0


def is_settled_amount(x: float, eps: float = MONEY_EPSILON) -> bool:
    """True when x is close enough to zero to count as settled"""
    return abs(x) <= eps


def amounts_close(a: float, b: float, tolerance: float = MONEY_EPSILON) -> bool:
    """Compare two money values within tolerance (inclusive)"""
    return abs(a - b) <= tolerance
