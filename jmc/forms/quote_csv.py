"""
Quote CSV export — the "Excel" download.

One row per line item, each category followed by its subtotal rows (labor
gets base / IVA / subtotal), then a TOTAL row. Zero amounts are written as
empty cells, same as in the PDF.
"""
import csv
import io
import os
import logging
from typing import Iterable, List, Optional

from ..core.currency import format_percent
from ..core.ledger import SCHEMA_SIMPLE, Ledger, compute_ledger, line_total
from ..core.model import Category, LineItem, SimpleItem
from ..core.numbers import parse_amount, parse_quantity
from ..core.paths import OUTPUT_DIR

log = logging.getLogger("quote_csv")

CSV_FILENAME = "presupuesto_jmc.csv"
SIMPLE_HEADER = ["Categoría", "Descripción", "Valor"]
EXTENDED_HEADER = ["Categoría", "Descripción", "Precio unitario", "Cantidad", "Monto"]


def _num(value) -> str:
    """0 → '', 50000.0 → '50000', 1234.5 → '1234.5'"""
    if not value:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return format(float(value), "f").rstrip("0").rstrip(".")


def _item_row(cat: Category, item: LineItem, schema: str) -> List[str]:
    desc = item.description or ""
    if schema == SCHEMA_SIMPLE:
        return [cat.label, desc, _num(line_total(item))]
    if isinstance(item, SimpleItem):
        amount = parse_amount(item.amount)
        return [cat.label, desc, _num(amount), "1" if amount else "", _num(amount)]
    price = parse_amount(item.unit_price)
    qty = _num(parse_quantity(item.quantity)) if price else ""
    return [cat.label, desc, _num(price), qty, _num(line_total(item))]


def _summary_row(caption: str, value, width: int) -> List[str]:
    return [caption] + [""] * (width - 2) + [_num(value)]


def quote_rows(categories: Iterable[Category], ledger: Ledger) -> List[List[str]]:
    """Header + data + summary rows, as lists of strings."""
    header = SIMPLE_HEADER if ledger.schema == SCHEMA_SIMPLE else EXTENDED_HEADER
    width = len(header)
    rows = [list(header)]
    for cat, totals in ledger.pair(categories):
        for item in cat.items:
            rows.append(_item_row(cat, item, ledger.schema))
        if cat.is_labor:
            rows.append(_summary_row(f"Base {cat.label}", totals.base, width))
            rows.append(_summary_row(f"IVA {format_percent(ledger.tax_rate)} {cat.label}", totals.tax, width))
        rows.append(_summary_row(f"Subtotal {cat.label}", totals.subtotal, width))
    rows.append(_summary_row("TOTAL", ledger.total, width))
    return rows


def render_table(categories: Iterable[Category], ledger: Optional[Ledger] = None) -> str:
    categories = list(categories)
    if ledger is None:
        ledger = compute_ledger(categories)
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerows(quote_rows(categories, ledger))
    return out.getvalue()


def write_quote_csv(categories: Iterable[Category], ledger: Optional[Ledger] = None,
                    path: Optional[str] = None) -> dict:
    """Write presupuesto_jmc.csv (UTF-8). Returns {ok, path, filename, rows}."""
    categories = list(categories)
    if ledger is None:
        ledger = compute_ledger(categories)
    path = path or os.path.join(OUTPUT_DIR, CSV_FILENAME)
    text = render_table(categories, ledger)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    rows = text.count("\n")
    log.info(f"Quote CSV {os.path.basename(path)}: {rows} rows", extra={"filename": CSV_FILENAME})
    return {"ok": True, "path": path, "filename": CSV_FILENAME, "rows": rows}
