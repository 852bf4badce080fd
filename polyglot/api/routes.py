"""
Flask routes orchestrator for the translation API

Registers the route blueprints:

- blueprints/config_routes.py: health, languages, API key
- blueprints/translation_routes.py: translate and detect
- blueprints/history_routes.py: translation history
"""
import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from .blueprints import (
    create_config_blueprint,
    create_translation_blueprint,
    create_history_blueprint
)
from .services import AppServices

logger = logging.getLogger(__name__)


def configure_routes(app, services):
    """
    Configure Flask routes by registering all blueprints

    Args:
        app: Flask application instance
        services: AppServices container
    """
    app.register_blueprint(create_config_blueprint(services))
    app.register_blueprint(create_translation_blueprint(services))
    app.register_blueprint(create_history_blueprint(services))

    _register_error_handlers(app)


def _register_error_handlers(app):
    """Register global error handlers"""

    @app.errorhandler(404)
    def route_not_found(error):
        return jsonify({"error": "API Endpoint not found"}), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        logger.exception(f"INTERNAL SERVER ERROR: {error}")
        return jsonify({"error": "Internal server error", "details": str(error)}), 500


def create_app(services: Optional[AppServices] = None) -> Flask:
    """Build the Flask application around ``services``."""
    app = Flask(__name__)
    CORS(app)
    services = services or AppServices.create()
    app.extensions['polyglot'] = services
    configure_routes(app, services)
    return app
