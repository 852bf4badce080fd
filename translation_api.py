"""
Flask web server for the translation API
"""
import sys
import logging
from datetime import datetime

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Reduce verbosity of werkzeug (Flask HTTP server logs)
logging.getLogger('werkzeug').setLevel(logging.WARNING)

from polyglot.config import (
    API_ENDPOINT,
    DEFAULT_MODEL,
    DATABASE_PATH,
    DEBUG_MODE,
    PORT,
    HOST
)
from polyglot.api import AppServices, create_app

if DEBUG_MODE:
    logging.getLogger().setLevel(logging.DEBUG)


def validate_configuration():
    """Validate required configuration before starting server"""
    issues = []

    if not PORT or not isinstance(PORT, int):
        issues.append("PORT must be a valid integer")
    if not DEFAULT_MODEL:
        issues.append("DEFAULT_MODEL must be configured")
    if not API_ENDPOINT:
        issues.append("API_ENDPOINT must be configured")

    if issues:
        logger.error("=" * 70)
        logger.error("CONFIGURATION ERROR")
        logger.error("=" * 70)
        for issue in issues:
            logger.error(f"   - {issue}")
        logger.error("Create a .env file from .env.example and restart")
        logger.error("=" * 70)
        raise ValueError("Configuration validation failed. See errors above.")

    logger.info("Configuration validated successfully")


try:
    services = AppServices.create(DATABASE_PATH)
except OSError as e:
    logger.error(f"Critical error: Unable to open database '{DATABASE_PATH}': {e}")
    sys.exit(1)

app = create_app(services)


if __name__ == '__main__':
    validate_configuration()

    logger.info("=" * 60)
    logger.info(f"POLYGLOT TRANSLATION SERVER (Version {datetime.now().strftime('%Y%m%d-%H%M')})")
    logger.info("=" * 60)
    logger.info(f"   - Endpoint: {API_ENDPOINT}")
    logger.info(f"   - Model: {DEFAULT_MODEL}")
    logger.info(f"   - API: http://{HOST}:{PORT}/api/")
    logger.info(f"   - Health Check: http://{HOST}:{PORT}/api/health")
    if not services.credentials.has_api_key():
        logger.warning("No API key configured: POST one to /api/api-key or set OPENAI_API_KEY")

    if HOST == '0.0.0.0':
        logger.warning("Server is binding to 0.0.0.0 (all network interfaces)")
        logger.warning("   For production, use a proper WSGI server like gunicorn:")
        logger.warning("   gunicorn -w 2 --bind 0.0.0.0:5000 translation_api:app")

    app.run(debug=False, host=HOST, port=PORT)
