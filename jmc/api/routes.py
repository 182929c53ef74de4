"""
Quote API — what the quote form calls.

The browser owns the form state and posts the whole quote on every call:

    {"client": {...}, "categories": [{"key", "label", "items": [...]}]}

Nothing is stored server side.
"""
import io
import logging

from flask import Blueprint, jsonify, request, send_file

from ..core.currency import format_currency
from ..core.ledger import compute_ledger
from ..core.model import (CAR_BRANDS, ClientMetadata, categories_from_payload,
                          categories_to_payload, client_from_payload,
                          client_to_payload, default_categories)
from ..forms.quote_csv import CSV_FILENAME, render_table
from ..forms.quote_pdf import pdf_filename, render_document

log = logging.getLogger("jmc.api")

bp = Blueprint("quotes", __name__)


class BadPayload(ValueError):
    pass


def _read_quote():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadPayload("Expected a JSON object")
    try:
        client = client_from_payload(data.get("client"))
        categories = categories_from_payload(data.get("categories"))
    except ValueError as e:
        raise BadPayload(str(e)) from e
    return client, categories


@bp.errorhandler(BadPayload)
def _bad_payload(e):
    log.warning("Rejected quote payload: %s", e)
    return jsonify({"ok": False, "error": str(e)}), 400


@bp.route("/api/health")
def api_health():
    return jsonify({"status": "ok"})


@bp.route("/api/quote/blank")
def api_quote_blank():
    """Starting state for a new quote."""
    return jsonify({
        "client": client_to_payload(ClientMetadata()),
        "categories": categories_to_payload(default_categories()),
        "brands": CAR_BRANDS,
    })


@bp.route("/api/quote/ledger", methods=["POST"])
def api_quote_ledger():
    _, categories = _read_quote()
    ledger = compute_ledger(categories)
    body = ledger.as_dict()
    body["ok"] = True
    body["formatted"] = {
        "categories": {t.key: {"base": format_currency(t.base),
                               "tax": format_currency(t.tax),
                               "subtotal": format_currency(t.subtotal)}
                       for t in ledger},
        "total": format_currency(ledger.total),
    }
    return jsonify(body)


@bp.route("/api/quote/pdf", methods=["POST"])
def api_quote_pdf():
    client, categories = _read_quote()
    ledger = compute_ledger(categories)
    pdf = render_document(client, categories, ledger)
    filename = pdf_filename(client)
    log.info("PDF export %s (%s)", filename, format_currency(ledger.total),
             extra={"filename": filename, "total": ledger.total})
    return send_file(io.BytesIO(pdf), mimetype="application/pdf",
                     as_attachment=True, download_name=filename)


@bp.route("/api/quote/csv", methods=["POST"])
def api_quote_csv():
    _, categories = _read_quote()
    text = render_table(categories, compute_ledger(categories))
    log.info("CSV export %s", CSV_FILENAME, extra={"filename": CSV_FILENAME})
    return send_file(io.BytesIO(text.encode("utf-8")), mimetype="text/csv; charset=utf-8",
                     as_attachment=True, download_name=CSV_FILENAME)
