# app/services/billing_math.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

Q2 = Decimal("0.01")


def D(x) -> Decimal:
    try:
        return Decimal(str(x or 0))
    except Exception:
        return Decimal("0")


def money2(x) -> Decimal:
    return D(x).quantize(Q2, rounding=ROUND_HALF_UP)


def parse_amount(x: Any) -> Optional[Decimal]:
    """
    Strict money parser for user input.
    Returns None for anything that is not a finite number
    (None, bool, blank, NaN, Infinity, garbage strings) and for
    sub-cent values like "50.004", which are never rounded silently.
    """
    if x is None or isinstance(x, bool):
        return None
    try:
        v = Decimal(str(x).strip())
    except (InvalidOperation, ValueError):
        return None
    if not v.is_finite():
        return None
    if v != v.quantize(Q2):
        return None
    return money2(v)
