"""
Shared pytest fixtures for the JMC Repair quote tests.

Every test gets its own output directory; nothing is written to the
project's output/ folder.
"""
import os
import pytest

from jmc.core.model import ClientMetadata, Category, PricedItem, SimpleItem


# ── Temp output directory (per-test isolation) ────────────────────────────────

@pytest.fixture(autouse=True)
def temp_output_dir(tmp_path, monkeypatch):
    """Redirect every module's OUTPUT_DIR to an isolated tmp directory."""
    out = str(tmp_path / "output")
    os.makedirs(out, exist_ok=True)
    for mod_name in ("jmc.core.paths", "jmc.forms.quote_pdf", "jmc.forms.quote_csv"):
        mod = __import__(mod_name, fromlist=["OUTPUT_DIR"])
        monkeypatch.setattr(mod, "OUTPUT_DIR", out)
    return out


@pytest.fixture
def shop_config():
    """Default shop config without an emblem (no file/network access)."""
    from jmc.core.config import DEFAULTS
    cfg = dict(DEFAULTS)
    cfg["emblem"] = ""
    return cfg


# ── Flask test client ─────────────────────────────────────────────────────────

@pytest.fixture
def app(monkeypatch, shop_config):
    from app import create_app
    import jmc.forms.quote_pdf as quote_pdf
    monkeypatch.setattr(quote_pdf, "load_config", lambda: dict(shop_config))
    return create_app(testing=True)


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


# ── Sample data factories ─────────────────────────────────────────────────────

@pytest.fixture
def sample_client():
    return ClientMetadata(
        client_name="Perez", client_phone="+56 9 1234 5678",
        client_email="perez@example.cl", vehicle_brand="Toyota",
        vehicle_model="Corolla", vehicle_year="2015",
        vehicle_mileage="120.000", plate="ABCD12",
    )


@pytest.fixture
def sample_categories():
    """Parts 50.000, labor 100.000 (+19% IVA), no supplies → total 169.000."""
    return [
        Category("repuestos", "Repuestos", (PricedItem("Filtro de aceite", "50.000", "1"),)),
        Category("mano_obra", "Mano de obra", (PricedItem("Cambio de aceite", "100.000", "1"),)),
        Category("insumos", "Insumos", (PricedItem("", "0", "1"),)),
    ]


@pytest.fixture
def simple_categories():
    """Older single-amount rows."""
    return [
        Category("repuestos", "Repuestos", (SimpleItem("Pastillas", "35.000"),
                                            SimpleItem("Discos", "60.000"))),
        Category("mano_obra", "Mano de obra", (SimpleItem("Frenos", "40.000"),)),
        Category("insumos", "Insumos", (SimpleItem("", ""),)),
    ]


@pytest.fixture
def sample_payload():
    """Same quote as sample_categories, as the browser posts it."""
    return {
        "client": {"clientName": "Perez", "plate": "ABCD12", "vehicleBrand": "Toyota",
                   "vehicleModel": "Corolla", "vehicleMileage": "120.000"},
        "categories": [
            {"key": "repuestos", "label": "Repuestos",
             "items": [{"description": "Filtro de aceite", "unitPrice": "50.000", "quantity": "1"}]},
            {"key": "mano_obra", "label": "Mano de obra",
             "items": [{"description": "Cambio de aceite", "unitPrice": "100.000", "quantity": ""}]},
            {"key": "insumos", "label": "Insumos",
             "items": [{"description": "", "unitPrice": "", "quantity": ""}]},
        ],
    }
