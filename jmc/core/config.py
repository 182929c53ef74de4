"""
Shop configuration.

Built-in defaults, optionally overridden by jmc_config.json at the project
root. The labor tax rate is fixed in the ledger and is not read from here.
"""
import json
import logging
import os
from typing import Optional

from .paths import CONFIG_PATH, EMBLEM_PATH

log = logging.getLogger("jmc.config")

DEFAULTS = {
    "shop_name": "JMC Repair",
    "subtitle": "Presupuesto de servicios mecánicos",
    "emblem": EMBLEM_PATH,
    "emblem_width_mm": 40,
    "emblem_timeout": 10,
}


def load_config(path: Optional[str] = None) -> dict:
    path = path or CONFIG_PATH
    cfg = dict(DEFAULTS)
    if not os.path.exists(path):
        return cfg
    with open(path, "r", encoding="utf-8") as f:
        overrides = json.load(f)
    unknown = set(overrides) - set(DEFAULTS)
    if unknown:
        log.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(sorted(unknown)))
    cfg.update({k: v for k, v in overrides.items() if k in DEFAULTS})
    return cfg
