"""
Configuration, language metadata and API key routes
"""
import logging
from flask import Blueprint, jsonify

from polyglot.config import (
    DEFAULT_MODEL,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    LIVE_TRANSLATE_DELAY_MS,
    DEBUG_MODE,
)
from polyglot.core.languages import LANGUAGE_NAMES, SPEECH_LOCALES, AUTO_DETECT
from polyglot.core.llm.exceptions import InvalidInputError
from .translation_routes import read_json_object, string_field

# Setup logger for this module
logger = logging.getLogger('config_routes')
if DEBUG_MODE:
    logger.setLevel(logging.DEBUG)


def create_config_blueprint(services):
    """Create and configure the config blueprint"""
    bp = Blueprint('config', __name__)

    @bp.route('/api/health', methods=['GET'])
    def health_check():
        """API health check endpoint"""
        return jsonify({
            "status": "ok",
            "model": DEFAULT_MODEL,
            "api_key_configured": services.credentials.has_api_key()
        })

    @bp.route('/api/languages', methods=['GET'])
    def get_languages():
        """Supported languages, defaults and speech locales"""
        return jsonify({
            "languages": LANGUAGE_NAMES,
            "auto_detect": AUTO_DETECT,
            "speech_locales": SPEECH_LOCALES,
            "default_source_language": DEFAULT_SOURCE_LANGUAGE,
            "default_target_language": DEFAULT_TARGET_LANGUAGE,
            "live_translate_delay_ms": LIVE_TRANSLATE_DELAY_MS
        })

    @bp.route('/api/api-key', methods=['GET'])
    def get_api_key_status():
        """Whether a usable key is configured (the key itself is never returned)"""
        return jsonify({"configured": services.credentials.has_api_key()})

    @bp.route('/api/api-key', methods=['POST'])
    def save_api_key():
        try:
            api_key = string_field(read_json_object(), 'api_key')
            services.credentials.save_api_key(api_key)
        except InvalidInputError as e:
            return jsonify({"error": e.message}), 400
        return jsonify({"configured": True, "message": "API key saved"})

    @bp.route('/api/api-key', methods=['DELETE'])
    def delete_api_key():
        removed = services.credentials.clear_api_key()
        return jsonify({"removed": removed, "configured": services.credentials.has_api_key()})

    return bp
