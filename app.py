#!/usr/bin/env python3
"""
JMC Repair — Application Entry Point
Creates the Flask app and registers the quote Blueprint.
"""
import os
import time
import logging

from flask import Flask, request

from logging_config import setup_logging

log = logging.getLogger("jmc")


def create_app(testing=False):
    """Application factory."""
    if not testing:
        setup_logging()

    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "jmc-repair-quotes")
    app.config["TESTING"] = testing

    from jmc.api.routes import bp
    app.register_blueprint(bp)

    # ── Request-level structured logging ────────────────────────────────────
    @app.before_request
    def _log_request_start():
        request._start_time = time.time()

    @app.after_request
    def _log_request_end(response):
        if hasattr(request, "_start_time") and request.path != "/api/health":
            duration_ms = round((time.time() - request._start_time) * 1000, 1)
            log.info("%s %s → %d (%.0fms)",
                     request.method, request.path, response.status_code, duration_ms,
                     extra={"route": request.path, "method": request.method,
                            "status": response.status_code, "duration_ms": duration_ms})
        return response

    if not testing:
        try:
            from jmc.core.paths import validate_paths
            checks = validate_paths()
            if not checks["ok"]:
                log.error("STARTUP: %d path checks FAILED", len(checks["errors"]))
        except OSError as e:
            log.warning("Path checks skipped: %s", e)

    return app


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    create_app().run(host="0.0.0.0", port=port, debug=False)
