"""
Locale-tolerant number parsing for hand-typed amounts.

Operators type amounts the way they write them on paper: "1.234.567",
"12.500,50", "3". Periods group thousands, the comma is the decimal mark.
Nothing in here raises on bad input — a draft quote is full of half-typed
values and the totals must keep working while the operator types.
"""
import re
from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP, InvalidOperation

_NUMBER_RE = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


def _normalize(raw) -> str:
    """'1.234,50' → '1234.50'"""
    return str(raw).strip().replace(".", "").replace(",", ".")


def parse_amount(raw) -> float:
    """Parse a money amount. Blank or garbage → 0.0."""
    if raw is None:
        return 0.0
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if value == value and value not in (float("inf"), float("-inf")) else 0.0
    text = _normalize(raw)
    if not _NUMBER_RE.match(text):
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    # "1e999" parses to inf
    if value in (float("inf"), float("-inf")):
        return 0.0
    return value


def parse_quantity(raw) -> float:
    """Parse a quantity. Blank means one unit; unreadable text also counts as one.

    An explicit "0" is honoured and zeroes the line.
    """
    if raw is None or isinstance(raw, bool):
        return 1.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = _normalize(raw)
        if not _NUMBER_RE.match(text):
            return 1.0
        value = float(text)
    # "1e999" overflows to inf
    if value != value or value in (float("inf"), float("-inf")):
        return 1.0
    return value


def round_half_up(value) -> int:
    """Round to whole currency units, ties toward +inf (28.5 → 29, -28.5 → -28)."""
    try:
        d = Decimal(repr(float(value)))
    except (InvalidOperation, ValueError, TypeError):
        return 0
    if not d.is_finite():
        return 0
    rounding = ROUND_HALF_UP if d >= 0 else ROUND_HALF_DOWN
    return int(d.quantize(Decimal("1"), rounding=rounding))
