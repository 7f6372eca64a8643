"""Application factory for the calendar localization API."""

import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from calendarl10n.catalog import LocalizationError, available_locales
from calendarl10n.catalog.registry import base_locale
from calendarl10n.version import get_project_version

from .http import localization_problem, problem_response
from .routes import register_routes

ALLOWED_ORIGINS_ENV = "CALENDARL10N_ALLOWED_ORIGINS"


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)

    allowed_origins = _parse_allowed_origins(os.getenv(ALLOWED_ORIGINS_ENV))

    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {
            "status": "ok",
            "version": get_project_version(),
            "locales": list(available_locales()),
            "base_locale": base_locale(),
        }
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed requests."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(FileNotFoundError)
    def handle_missing_catalogue(error: FileNotFoundError):
        """Report catalogues declared but absent on disk."""

        return problem_response("not_found", status=404, message=str(error)).to_response()

    @app.errorhandler(LocalizationError)
    def handle_localization_error(error: LocalizationError):
        """Surface catalogue data problems without crashing the worker."""

        return localization_problem(error).to_response()

    return app
