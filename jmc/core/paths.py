"""
jmc/core/paths.py — Centralized Path Configuration

Every module imports its directories from here instead of computing its own.

Environment overrides:
    JMC_DATA_DIR     logs and local data       (default: <project>/data)
    JMC_OUTPUT_DIR   exported PDF / CSV files  (default: <project>/output)
    JMC_EMBLEM       shop emblem, file path or http(s) URL
"""

import os
import logging

log = logging.getLogger("jmc.paths")

# ── Project Root ──────────────────────────────────────────────────────────────
_THIS_FILE = os.path.abspath(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_THIS_FILE)))

DATA_DIR = os.environ.get("JMC_DATA_DIR") or os.path.join(PROJECT_ROOT, "data")
OUTPUT_DIR = os.environ.get("JMC_OUTPUT_DIR") or os.path.join(PROJECT_ROOT, "output")
ASSETS_DIR = os.path.join(PROJECT_ROOT, "assets")

# ── Key File Paths ───────────────────────────────────────────────────────────
CONFIG_PATH = os.path.join(PROJECT_ROOT, "jmc_config.json")
EMBLEM_PATH = os.environ.get("JMC_EMBLEM") or os.path.join(ASSETS_DIR, "logo-jmc.jpg")
LOG_DIR = os.path.join(DATA_DIR, "logs")


def is_url(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def validate_paths() -> dict:
    """Startup check — the emblem is optional, the output dir must be writable.

    Returns:
        {"ok": bool, "errors": [str], "warnings": [str], "resolved": {name: path}}
    """
    result = {"ok": True, "errors": [], "warnings": [], "resolved": {
        "PROJECT_ROOT": PROJECT_ROOT, "DATA_DIR": DATA_DIR,
        "OUTPUT_DIR": OUTPUT_DIR, "EMBLEM_PATH": EMBLEM_PATH,
    }}

    if not is_url(EMBLEM_PATH) and not os.path.exists(EMBLEM_PATH):
        result["warnings"].append(f"Emblem not found: {EMBLEM_PATH} (PDFs print without it)")

    try:
        os.makedirs(OUTPUT_DIR, exist_ok=True)
        test_file = os.path.join(OUTPUT_DIR, ".write_test")
        with open(test_file, "w") as f:
            f.write("ok")
        os.remove(test_file)
    except OSError as e:
        result["errors"].append(f"OUTPUT_DIR not writable: {e}")
        result["ok"] = False

    for w in result["warnings"]:
        log.warning(w)
    for e in result["errors"]:
        log.error(e)
    return result
