"""Tests for jmc/core/config.py, jmc/core/paths.py and logging_config.py."""
import json
import logging

import pytest

from jmc.core.config import DEFAULTS, load_config
from jmc.core.paths import is_url, validate_paths


class TestConfig:

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(str(tmp_path / "none.json")) == DEFAULTS

    def test_override(self, tmp_path):
        p = tmp_path / "jmc_config.json"
        p.write_text(json.dumps({"shop_name": "JMC Repair Maipú", "emblem": ""}))
        cfg = load_config(str(p))
        assert cfg["shop_name"] == "JMC Repair Maipú"
        assert cfg["emblem"] == ""
        assert cfg["subtitle"] == DEFAULTS["subtitle"]

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        p = tmp_path / "jmc_config.json"
        p.write_text(json.dumps({"tax_rate": 0.5}))
        with caplog.at_level(logging.WARNING, logger="jmc.config"):
            cfg = load_config(str(p))
        assert "tax_rate" not in cfg
        assert any("tax_rate" in r.getMessage() for r in caplog.records)

    def test_broken_json_raises(self, tmp_path):
        p = tmp_path / "jmc_config.json"
        p.write_text("{")
        with pytest.raises(ValueError):
            load_config(str(p))


class TestPaths:

    def test_is_url(self):
        assert is_url("https://jmc.cl/logo.jpg")
        assert not is_url("/srv/assets/logo.jpg")

    def test_validate_writable_output(self):
        result = validate_paths()
        assert result["ok"] is True
        assert "OUTPUT_DIR" in result["resolved"]


class TestLogging:

    def test_setup_writes_json_file(self, tmp_path):
        from logging_config import setup_logging
        root = logging.getLogger()
        saved = (root.level, list(root.handlers))
        try:
            setup_logging(level="INFO", json_logs=True, log_dir=str(tmp_path))
            logging.getLogger("jmc.test").info("hola", extra={"total": 169000})
            for h in root.handlers:
                h.flush()
            lines = (tmp_path / "jmc.log").read_text(encoding="utf-8").splitlines()
            entry = json.loads(lines[-1])
            assert entry["msg"] == "hola"
            assert entry["total"] == 169000
        finally:
            for h in root.handlers:
                h.close()
            root.handlers[:] = saved[1]
            root.setLevel(saved[0])
