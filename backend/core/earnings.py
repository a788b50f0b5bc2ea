from typing import Optional
import math
import re

from .errors import InvalidInputError

# first numeric run; thousands separators and a decimal tail are allowed
_AMOUNT_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")


def _number(value: float):
    return int(value) if float(value).is_integer() else float(value)


def parse_amount(amount: Optional[str]) -> Optional[float]:
    """
    Pull the leading numeric value out of a free-form currency string.
    "₹500 - ₹1500" -> 500, "Rs. 1,200" -> 1200, "negotiable" -> None
    A run too long to represent counts as no number at all.
    """
    m = _AMOUNT_RE.search(str(amount or ""))
    if not m:
        return None
    value = float(m.group(0).replace(",", ""))
    if not math.isfinite(value):
        return None
    return _number(value)


def compute_earnings(amount: Optional[str], explicit: Optional[float], fallback: float):
    if explicit is not None:
        if not math.isfinite(explicit) or explicit < 0:
            raise InvalidInputError("earnings must be a finite, non-negative number")
        return _number(explicit)
    parsed = parse_amount(amount)
    return _number(fallback) if parsed is None else parsed
