"""
Translation and language detection routes
"""
import asyncio
import logging
from flask import Blueprint, request, jsonify

from polyglot.config import DEFAULT_SOURCE_LANGUAGE, DEFAULT_TARGET_LANGUAGE
from polyglot.core.languages import LANGUAGE_NAMES, is_supported_source, is_supported_target
from polyglot.core.llm.exceptions import (
    InvalidInputError,
    RemoteRejectedError,
    TransientError,
    TranslationError,
    UnauthenticatedError,
)
from polyglot.core.models import TranslationRequest

logger = logging.getLogger(__name__)


def _resolve_api_key(services):
    """
    Resolve the API key for this request.

    An ``Authorization: Bearer`` header wins over the saved key.
    """
    header = request.headers.get('Authorization', '')
    if header.lower().startswith('bearer '):
        return header[7:].strip()
    return services.credentials.get_api_key()


def read_json_object():
    """
    Parse the request body as a JSON object. A missing or unparsable body is
    treated as empty.

    Raises:
        InvalidInputError: if the body is JSON but not an object
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def string_field(data, name, default=''):
    """Read an optional string field; empty values fall back to ``default``."""
    value = data.get(name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidInputError(f"Field '{name}' must be a string")
    return value or default


def error_response(error: TranslationError):
    """Map a pipeline failure to a JSON error response."""
    body = {"error": error.message, "kind": error.kind.value if error.kind else None}
    if isinstance(error, InvalidInputError):
        return jsonify(body), 400
    if isinstance(error, UnauthenticatedError):
        return jsonify(body), 401
    if isinstance(error, RemoteRejectedError):
        body["remote_status"] = error.status_code
        return jsonify(body), 502
    if isinstance(error, TransientError):
        return jsonify(body), 503
    return jsonify(body), 500


def run_with_pipeline(services, operation):
    """Run ``operation(pipeline)`` in a fresh event loop, closing the pipeline after."""
    async def runner():
        pipeline = services.pipeline_factory()
        try:
            return await operation(pipeline)
        finally:
            await pipeline.close()

    return asyncio.run(runner())


def create_translation_blueprint(services):
    """
    Create and configure the translation blueprint

    Args:
        services: AppServices container
    """
    bp = Blueprint('translation', __name__)

    @bp.route('/api/translate', methods=['POST'])
    def translate_text():
        """Translate text and record it in history"""
        try:
            data = read_json_object()
            text = string_field(data, 'text')
            source_language = string_field(data, 'source_language', DEFAULT_SOURCE_LANGUAGE)
            target_language = string_field(data, 'target_language', DEFAULT_TARGET_LANGUAGE)

            if not is_supported_source(source_language):
                raise InvalidInputError(f"Unsupported source language: {source_language}")
            if not is_supported_target(target_language):
                raise InvalidInputError(f"Unsupported target language: {target_language}")
        except InvalidInputError as e:
            return error_response(e)

        translation_request = TranslationRequest(
            source_text=text.strip(),
            source_language=source_language,
            target_language=target_language,
            language_names=LANGUAGE_NAMES
        )
        api_key = _resolve_api_key(services)

        try:
            translation = run_with_pipeline(
                services,
                lambda pipeline: pipeline.translate(translation_request, api_key)
            )
        except TranslationError as e:
            logger.warning(f"Translation request failed: {e}")
            return error_response(e)

        entry = services.history.add(translation_request.source_text, translation,
                                     source_language, target_language)
        return jsonify({
            "translation": translation,
            "source_language": source_language,
            "target_language": target_language,
            "history_id": entry.id
        })

    @bp.route('/api/detect', methods=['POST'])
    def detect_language():
        """Detect the language of a text sample"""
        try:
            text = string_field(read_json_object(), 'text')
        except InvalidInputError as e:
            return error_response(e)
        api_key = _resolve_api_key(services)

        try:
            language = run_with_pipeline(
                services,
                lambda pipeline: pipeline.detect_language(text, api_key)
            )
        except TranslationError as e:
            logger.warning(f"Detection request failed: {e}")
            return error_response(e)

        return jsonify({"language": language})

    return bp
