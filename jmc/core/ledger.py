"""
Ledger — per-category base / tax / subtotal and the grand total.

Labor (mano_obra) is the only taxed category: 19% IVA on its base,
rounded to whole pesos. Everything is recomputed from the raw line items on
every call; the result is a frozen value with no link back to the input.
"""
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from .model import LABOR_KEY, Category, LineItem, SimpleItem
from .numbers import parse_amount, parse_quantity, round_half_up

log = logging.getLogger("jmc.ledger")

LABOR_TAX_RATE = 0.19
SCHEMA_SIMPLE = "simple"
SCHEMA_EXTENDED = "extended"


@dataclass(frozen=True)
class CategoryTotals:
    key: str
    label: str
    base: float
    tax: float
    subtotal: float

    @property
    def is_labor(self) -> bool:
        return self.key == LABOR_KEY


@dataclass(frozen=True)
class Ledger:
    totals: Tuple[CategoryTotals, ...]
    total: float
    schema: str = SCHEMA_EXTENDED
    tax_rate: float = LABOR_TAX_RATE

    def __getitem__(self, key: str) -> CategoryTotals:
        for t in self.totals:
            if t.key == key:
                return t
        raise KeyError(key)

    def __iter__(self) -> Iterator[CategoryTotals]:
        return iter(self.totals)

    def __len__(self):
        return len(self.totals)

    def pair(self, categories: Iterable[Category]) -> List[Tuple[Category, CategoryTotals]]:
        """Each category with its own totals, matched by position, not by key."""
        categories = list(categories)
        if [c.key for c in categories] != [t.key for t in self.totals]:
            raise ValueError("ledger was computed for different categories")
        return list(zip(categories, self.totals))

    def as_dict(self) -> dict:
        return {
            "categories": {t.key: {"label": t.label, "base": t.base,
                                   "tax": t.tax, "subtotal": t.subtotal}
                           for t in self.totals},
            "total": self.total,
            "schema": self.schema,
            "tax_rate": self.tax_rate,
        }


def line_total(item: LineItem) -> float:
    """SimpleItem amount is the line total; PricedItem is price × quantity."""
    if isinstance(item, SimpleItem):
        return parse_amount(item.amount)
    return parse_amount(item.unit_price) * parse_quantity(item.quantity)


def labor_tax(base: float) -> float:
    """19000 for a base of 100000."""
    return float(round_half_up(base * LABOR_TAX_RATE))


def detect_schema(categories: Iterable[Category]) -> str:
    items = [i for c in categories for i in c.items]
    if items and all(isinstance(i, SimpleItem) for i in items):
        return SCHEMA_SIMPLE
    return SCHEMA_EXTENDED


def compute_ledger(categories: Iterable[Category]) -> Ledger:
    categories = list(categories)
    totals = []
    for cat in categories:
        base = math.fsum(line_total(i) for i in cat.items)
        tax = labor_tax(base) if cat.key == LABOR_KEY else 0.0
        totals.append(CategoryTotals(cat.key, cat.label, base, tax, base + tax))
    # fsum keeps the total independent of category order
    total = math.fsum(t.subtotal for t in totals)
    log.debug("ledger: %d categories, total=%s", len(totals), total)
    return Ledger(tuple(totals), total, detect_schema(categories))
