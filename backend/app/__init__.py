"""Application factory and app-wide configuration."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from backend.app.api.routes import api_bp
from backend.app.config import Config
from backend.services.rates import HttpRateProvider, RateProvider


def create_app(config_object: Optional[object] = None, rate_provider: Optional[RateProvider] = None) -> Flask:
    """Build the Flask app instance.

    ``rate_provider`` replaces the live exchange-rate feed, e.g. with a
    StaticRateProvider when running offline.
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.extensions["rate_provider"] = rate_provider or HttpRateProvider(
        url=app.config["RATES_URL"],
        timeout=app.config["RATES_TIMEOUT_SECONDS"],
        cache_seconds=app.config["RATES_CACHE_SECONDS"],
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
