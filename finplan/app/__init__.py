"""Application factory and app-wide configuration."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS

from finplan.app.api.routes import api_bp
from finplan.config import Settings, load_settings
from finplan.logging_config import setup_logging


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.config["FINPLAN_SETTINGS"] = settings

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.cors_origins)}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
