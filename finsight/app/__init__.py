"""Application factory and app-wide configuration."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from finsight.app.api.routes import api_bp
from finsight.core.logging import setup_logging
from finsight.config import Settings, get_settings
from finsight.domain.profiles import JsonFileProfileRepository, ProfileRepository
from finsight.services.insights import InsightService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    repository: Optional[ProfileRepository] = None,
    insight_service: Optional[InsightService] = None,
) -> Flask:
    """Build the Flask app instance.

    The profile repository and insight service are injected so tests can
    swap in a temporary store and a stubbed model.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.extensions["finsight"] = {
        "settings": settings,
        "repository": repository or JsonFileProfileRepository(settings.profile_store_path),
        "insights": insight_service or InsightService(settings),
    }

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info("%s started with settings %s", settings.app_name, settings.dict_for_logging())
    return app
