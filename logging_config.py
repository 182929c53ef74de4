"""
Structured logging configuration for the JMC Repair quote tool.
Import and call setup_logging() once at app startup.
"""
import logging
import logging.handlers
import os
import json
from datetime import datetime, timezone

from jmc.core.paths import LOG_DIR


class JSONFormatter(logging.Formatter):
    """Structured JSON log lines for machine parsing."""
    EXTRA_KEYS = ("route", "method", "status", "duration_ms", "filename", "total")

    def format(self, record):
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in self.EXTRA_KEYS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Readable console format with color."""
    COLORS = {
        "DEBUG": "\033[36m", "INFO": "\033[32m",
        "WARNING": "\033[33m", "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        return f"{color}{ts} [{record.levelname[0]}] {record.name}: {record.getMessage()}{self.RESET}"


def setup_logging(level=None, json_logs=None, log_dir=None):
    """
    Configure logging for the full application.

    Args:
        level: Override log level (default: from LOG_LEVEL env or INFO)
        json_logs: Force JSON console format (default: on when JMC_JSON_LOGS is set)
        log_dir: Where the rotating file goes (default: DATA_DIR/logs)
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO").upper()
    if json_logs is None:
        json_logs = bool(os.environ.get("JMC_JSON_LOGS"))
    log_dir = log_dir or LOG_DIR

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else HumanFormatter())
    root.addHandler(console)

    # File handler: rotates at 5MB, keeps 5 backups
    try:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, "jmc.log"),
            maxBytes=5_000_000, backupCount=5, encoding="utf-8",
        )
        fh.setFormatter(JSONFormatter())
        root.addHandler(fh)
    except OSError as e:
        root.warning("File logging disabled (%s): %s", log_dir, e)

    # Quiet noisy libs
    for name in ("urllib3", "werkzeug", "PIL", "reportlab", "pdfminer"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("jmc").info("Logging initialized", extra={"level": level})
