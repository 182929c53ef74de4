"""
JMC Repair Quote PDF Generator
================================
One-pass, top-to-bottom layout on an A4 canvas:

  - Shop emblem top-right, centred on the title baseline (optional)
  - Title + subtitle
  - Client / vehicle table
  - One table per category with its subtotal block (labor shows base, IVA
    and subtotal with IVA)
  - TOTAL line

Tables are platypus Tables drawn straight onto the canvas; a table that does
not fit the rest of the page is split and continues on the next one.
"""

import io
import os
import logging
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

import requests
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, Table, TableStyle

from ..core.config import load_config
from ..core.currency import format_cell, format_currency, format_percent, format_quantity
from ..core.ledger import (LABOR_TAX_RATE, SCHEMA_SIMPLE, CategoryTotals, Ledger,
                           compute_ledger, line_total)
from ..core.model import Category, ClientMetadata, LineItem, SimpleItem
from ..core.numbers import parse_amount, parse_quantity
from ..core.paths import OUTPUT_DIR, is_url

log = logging.getLogger("quote_pdf")

# ═══════════════════════════════════════════════════════════════════════════════
# Page grid: distances are measured from the TOP of the page
# ═══════════════════════════════════════════════════════════════════════════════
PAGE_W, PAGE_H = A4
MARGIN_L = 14 * mm
MARGIN_R = 14 * mm
MARGIN_T = 14 * mm
MARGIN_B = 14 * mm
CONTENT_W = PAGE_W - MARGIN_L - MARGIN_R
TITLE_Y = 20 * mm
CLIENT_TABLE_Y = 42 * mm
FALLBACK_ADVANCE = 10 * mm
SUMMARY_LINE_H = 5 * mm

HEAD_FILL = colors.Color(230 / 255, 230 / 255, 230 / 255)
GRID_CLR = colors.Color(200 / 255, 200 / 255, 200 / 255)

CELL_STYLE = ParagraphStyle("cell", fontName="Helvetica", fontSize=7, leading=8.5)

SIMPLE_COLUMNS = ["Descripción", "Valor"]
EXTENDED_COLUMNS = ["Descripción", "Precio unitario", "Cantidad", "Total"]


# ═══════════════════════════════════════════════════════════════════════════════
# Table layout
# ═══════════════════════════════════════════════════════════════════════════════

class TableRenderer:
    """Draws grid tables onto a canvas and reports where they end.

    render() takes the table's top edge as a distance from the page top and
    returns its bottom edge the same way, on whatever page the table finished.
    None means the table reported no height and the caller has to guess.
    """

    def __init__(self, c, left=MARGIN_L, width=CONTENT_W, top=MARGIN_T, bottom=MARGIN_B):
        self.c = c
        self.left = left
        self.width = width
        self.top = top
        self.bottom = bottom
        self.page_breaks = 0

    def build(self, columns, rows, col_widths, numeric_cols=()):
        data = [list(columns)]
        for row in rows:
            data.append([v if i in numeric_cols else Paragraph(escape(str(v)), CELL_STYLE)
                         for i, v in enumerate(row)])
        style = [
            ("GRID", (0, 0), (-1, -1), 0.25, GRID_CLR),
            ("BACKGROUND", (0, 0), (-1, 0), HEAD_FILL),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 7),
            ("TEXTCOLOR", (0, 0), (-1, -1), colors.black),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), 1.2 * mm),
            ("RIGHTPADDING", (0, 0), (-1, -1), 1.2 * mm),
            ("TOPPADDING", (0, 0), (-1, -1), 1.2 * mm),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 1.2 * mm),
        ]
        for i in numeric_cols:
            style.append(("ALIGN", (i, 0), (i, -1), "RIGHT"))
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle(style))
        return table

    def lead_height(self, columns, rows, col_widths, numeric_cols=()) -> float:
        """Height of the header plus the first data row, the least a page must hold."""
        lead = self.build(columns, list(rows)[:1], col_widths, numeric_cols)
        _, h = lead.wrapOn(self.c, self.width, PAGE_H)
        return h or 0

    def _new_page(self):
        self.c.showPage()
        self.page_breaks += 1
        return self.top

    def render(self, columns, rows, col_widths, y, numeric_cols=()) -> Optional[float]:
        table = self.build(columns, rows, col_widths, numeric_cols)
        fresh_page = False
        while True:
            space = PAGE_H - self.bottom - y
            _, h = table.wrapOn(self.c, self.width, space)
            if not h:
                return None
            if h <= space:
                table.drawOn(self.c, self.left, PAGE_H - y - h)
                return y + h
            parts = table.split(self.width, space) if space > 0 else []
            if len(parts) >= 2:
                first, table = parts[0], parts[1]
                _, fh = first.wrapOn(self.c, self.width, space)
                first.drawOn(self.c, self.left, PAGE_H - y - fh)
                y = self._new_page()
                fresh_page = True
                continue
            if fresh_page:
                # a single row taller than a whole page; let it run off
                table.drawOn(self.c, self.left, PAGE_H - y - h)
                return y + h
            y = self._new_page()
            fresh_page = True


# ═══════════════════════════════════════════════════════════════════════════════
# Emblem
# ═══════════════════════════════════════════════════════════════════════════════

def load_emblem(source, timeout=10) -> Optional[ImageReader]:
    """Load and decode the emblem from a path or URL. None on any failure."""
    if not source:
        return None
    try:
        if is_url(source):
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
            img = ImageReader(io.BytesIO(resp.content))
        else:
            img = ImageReader(source)
        img.getSize()
        return img
    except Exception as e:
        log.warning(f"Emblem unavailable ({source}): {e}")
        return None


def _draw_emblem(c, img, width):
    iw, ih = img.getSize()
    height = ih * width / iw
    x = PAGE_W - MARGIN_R - width
    top = TITLE_Y - height / 2
    c.drawImage(img, x, PAGE_H - top - height, width=width, height=height, mask="auto")


# ═══════════════════════════════════════════════════════════════════════════════
# Rows and captions
# ═══════════════════════════════════════════════════════════════════════════════

def client_rows(meta: ClientMetadata) -> List[List[str]]:
    vehicle = f"{meta.vehicle_brand or '-'} {meta.vehicle_model or ''}".strip()
    return [
        ["Cliente", meta.client_name or "-"],
        ["Teléfono", meta.client_phone or "-"],
        ["Email", meta.client_email or "-"],
        ["Vehículo", vehicle],
        ["Año", meta.vehicle_year or "-"],
        ["Kilometraje", f"{meta.vehicle_mileage} km" if meta.vehicle_mileage else "-"],
        ["Patente", meta.plate or "-"],
    ]


def item_row(item: LineItem, schema: str) -> List[str]:
    desc = item.description or ""
    if schema == SCHEMA_SIMPLE:
        return [desc, format_cell(line_total(item))]
    if isinstance(item, SimpleItem):
        amount = parse_amount(item.amount)
        return [desc, format_cell(amount), "1" if amount else "", format_cell(amount)]
    price = parse_amount(item.unit_price)
    qty = format_quantity(parse_quantity(item.quantity)) if price else ""
    return [desc, format_cell(price), qty, format_cell(line_total(item))]


def _item_columns(schema):
    if schema == SCHEMA_SIMPLE:
        return SIMPLE_COLUMNS, [CONTENT_W - 35 * mm, 35 * mm], (1,)
    fixed = [30 * mm, 20 * mm, 30 * mm]
    return EXTENDED_COLUMNS, [CONTENT_W - sum(fixed)] + fixed, (1, 2, 3)


def summary_lines(cat: Category, totals: CategoryTotals,
                  tax_rate: float = LABOR_TAX_RATE) -> List[str]:
    if cat.is_labor:
        return [
            f"Base {cat.label}: {format_currency(totals.base)}",
            f"IVA ({format_percent(tax_rate)}): {format_currency(totals.tax)}",
            f"Subtotal {cat.label} (IVA incluido): {format_currency(totals.subtotal)}",
        ]
    return [f"Subtotal {cat.label}: {format_currency(totals.subtotal)}"]


def pdf_filename(meta: ClientMetadata) -> str:
    return f"presupuesto_{meta.client_name or 'cliente'}_{meta.plate or 'vehiculo'}.pdf"


# ═══════════════════════════════════════════════════════════════════════════════
# PDF GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════

def _line(c, text, y, size, font="Helvetica"):
    c.setFont(font, size)
    c.setFillColor(colors.black)
    c.drawString(MARGIN_L, PAGE_H - y, text)


def _ensure_space(c, y, needed):
    """New page if `needed` points below y would cross the bottom margin."""
    if y + needed > PAGE_H - MARGIN_B:
        c.showPage()
        return MARGIN_T
    return y


def _advance(final_y, start_y, gap, what):
    if final_y is None:
        log.warning(f"No table height for {what}; advancing {FALLBACK_ADVANCE:.0f}pt")
        return start_y + FALLBACK_ADVANCE
    return final_y + gap


def render_document(metadata: ClientMetadata, categories: Iterable[Category],
                    ledger: Optional[Ledger] = None, config: Optional[dict] = None,
                    emblem=None) -> bytes:
    """Render the quote and return the PDF bytes.

    `emblem` may be a preloaded ImageReader; by default it is loaded from the
    configured source and skipped if that fails.
    """
    cfg = config or load_config()
    categories = list(categories)
    if ledger is None:
        ledger = compute_ledger(categories)

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.setTitle(f"{cfg['shop_name']} - {pdf_filename(metadata)[:-4]}")
    c.setAuthor(cfg["shop_name"])

    # ─── Emblem ───────────────────────────────────────────────
    if emblem is None:
        emblem = load_emblem(cfg.get("emblem"), cfg.get("emblem_timeout", 10))
    if emblem is not None:
        try:
            _draw_emblem(c, emblem, cfg.get("emblem_width_mm", 40) * mm)
        except Exception as e:
            log.warning(f"Emblem: {e}")

    # ─── Title ────────────────────────────────────────────────
    _line(c, cfg["shop_name"], TITLE_Y, 18)
    _line(c, cfg["subtitle"], TITLE_Y + 7 * mm, 11)

    # ─── Client / vehicle ─────────────────────────────────────
    tables = TableRenderer(c)
    final_y = tables.render(["Dato", "Información"], client_rows(metadata),
                            [35 * mm, CONTENT_W - 35 * mm], CLIENT_TABLE_Y)
    y = _advance(final_y, CLIENT_TABLE_Y, 6 * mm, "client table")

    # ─── Categories ───────────────────────────────────────────
    columns, widths, numeric = _item_columns(ledger.schema)
    for cat, totals in ledger.pair(categories):
        rows = [item_row(item, ledger.schema) for item in cat.items]
        # heading stays on the page that holds the table header and first row
        lead = max(tables.lead_height(columns, rows, widths, numeric), FALLBACK_ADVANCE)
        y = _ensure_space(c, y, min(4 * mm + lead, PAGE_H - MARGIN_T - MARGIN_B))
        _line(c, cat.label, y, 10)
        y += 4 * mm
        final_y = tables.render(columns, rows, widths, y, numeric)
        y = _advance(final_y, y, 4 * mm, cat.label)
        for text in summary_lines(cat, totals, ledger.tax_rate):
            y = _ensure_space(c, y, SUMMARY_LINE_H)
            _line(c, text, y, 9)
            y += SUMMARY_LINE_H
        y += 3 * mm

    # ─── Total ────────────────────────────────────────────────
    y = _ensure_space(c, y + 4 * mm, 6 * mm)
    _line(c, f"TOTAL: {format_currency(ledger.total)}", y, 11, "Helvetica-Bold")

    c.save()
    return buf.getvalue()


def generate_quote_pdf(metadata: ClientMetadata, categories: Iterable[Category],
                       ledger: Optional[Ledger] = None, output_path: Optional[str] = None,
                       config: Optional[dict] = None) -> dict:
    """Render and write the quote PDF. Returns {ok, path, filename, total, categories}."""
    categories = list(categories)
    if ledger is None:
        ledger = compute_ledger(categories)
    filename = pdf_filename(metadata)
    if output_path is None:
        # path separators in a client name would point outside OUTPUT_DIR
        output_path = os.path.join(OUTPUT_DIR, filename.replace("/", "-").replace("\\", "-"))

    pdf = render_document(metadata, categories, ledger, config)
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    with open(output_path, "wb") as f:
        f.write(pdf)

    log.info(f"Quote PDF {filename}: {len(categories)} categories, total {format_currency(ledger.total)}",
             extra={"filename": filename, "total": ledger.total})
    return {
        "ok": True, "path": output_path, "filename": filename,
        "total": ledger.total, "categories": len(categories),
    }
