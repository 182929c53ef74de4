"""
Chilean peso display: "$1.234.567". No decimals, the peso has no minor unit.
"""
from .numbers import round_half_up


def _group(n: int) -> str:
    return f"{n:,}".replace(",", ".")


def format_currency(amount) -> str:
    """1234567 → '$1.234.567', -1500 → '-$1.500', 0 → '$0'."""
    n = round_half_up(amount)
    if n < 0:
        return f"-${_group(-n)}"
    return f"${_group(n)}"


def format_cell(amount) -> str:
    """Table cell variant: zero renders as an empty cell."""
    if not amount:
        return ""
    return format_currency(amount)


def format_quantity(qty) -> str:
    """2 → '2', 1.5 → '1,5', 0 → ''"""
    if not qty:
        return ""
    sign = "-" if qty < 0 else ""
    whole, _, frac = format(abs(float(qty)), "f").rstrip("0").partition(".")
    text = _group(int(whole))
    return f"{sign}{text},{frac}" if frac else f"{sign}{text}"


def format_percent(rate: float) -> str:
    """0.19 → '19%'"""
    return f"{rate * 100:g}%"
