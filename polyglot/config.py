"""
Centralized configuration
"""
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("DEBUG_MODE enabled - verbose logging active")

# Get config directory (current working directory)
_config_dir = Path.cwd()
_env_file = _config_dir / '.env'
_env_example = _config_dir / '.env.example'

if not _env_file.exists():
    if _env_example.exists():
        _config_logger.warning(".env not found, using defaults (copy .env.example to .env to configure)")
    else:
        _config_logger.warning(f".env not found in {_config_dir}, using defaults")

# Load .env file if it exists
_dotenv_result = load_dotenv(_env_file)
if _debug_mode:
    _config_logger.debug(f"load_dotenv() returned: {_dotenv_result} for {_env_file.absolute()}")

# Remote chat-completion endpoint
API_ENDPOINT = os.getenv('API_ENDPOINT', 'https://api.openai.com/v1/chat/completions')
DEFAULT_MODEL = os.getenv('DEFAULT_MODEL', 'gpt-3.5-turbo')
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')

# Request pipeline
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '30'))
MAX_TRANSLATION_ATTEMPTS = int(os.getenv('MAX_TRANSLATION_ATTEMPTS', '3'))
RETRY_BASE_DELAY_SECONDS = float(os.getenv('RETRY_BASE_DELAY_SECONDS', '1'))
RETRY_BACKOFF_FACTOR = 2.0

# Response budgets and sampling
TRANSLATION_TEMPERATURE = 0.3
DETECTION_TEMPERATURE = 0.0
MIN_TRANSLATION_TOKENS = 100
MAX_TRANSLATION_TOKENS = 1000
TOKENS_PER_SOURCE_CHAR = 2
DETECTION_MAX_TOKENS = 10
DETECTION_SAMPLE_LENGTH = 500

# Credential structure
API_KEY_PREFIX = 'sk-'

# Live translation
LIVE_TRANSLATE_DELAY_MS = int(os.getenv('LIVE_TRANSLATE_DELAY_MS', '1000'))

# History
HISTORY_MAX_ITEMS = int(os.getenv('HISTORY_MAX_ITEMS', '20'))
HISTORY_SNIPPET_LENGTH = 100
DATABASE_PATH = os.getenv('DATABASE_PATH', 'data/polyglot.db')

# Default languages from environment
DEFAULT_SOURCE_LANGUAGE = os.getenv('DEFAULT_SOURCE_LANGUAGE', 'auto')
DEFAULT_TARGET_LANGUAGE = os.getenv('DEFAULT_TARGET_LANGUAGE', 'en')

# Server configuration
HOST = os.getenv('HOST', '127.0.0.1')
PORT = int(os.getenv('PORT', '5000'))

# Debug mode (reload after .env is loaded)
DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'


def mask_api_key(api_key: str) -> str:
    """Render a key for logs without exposing it."""
    return '***' + api_key[-4:] if api_key else '(not set)'


# Log loaded configuration in debug mode
if DEBUG_MODE or _debug_mode:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("=" * 60)
    _config_logger.debug("LOADED CONFIGURATION VALUES:")
    _config_logger.debug("=" * 60)
    _config_logger.debug(f"   API_ENDPOINT: {API_ENDPOINT}")
    _config_logger.debug(f"   DEFAULT_MODEL: {DEFAULT_MODEL}")
    _config_logger.debug(f"   REQUEST_TIMEOUT: {REQUEST_TIMEOUT}")
    _config_logger.debug(f"   MAX_TRANSLATION_ATTEMPTS: {MAX_TRANSLATION_ATTEMPTS}")
    _config_logger.debug(f"   LIVE_TRANSLATE_DELAY_MS: {LIVE_TRANSLATE_DELAY_MS}")
    _config_logger.debug(f"   DATABASE_PATH: {DATABASE_PATH}")
    _config_logger.debug(f"   DEFAULT_SOURCE_LANGUAGE: {DEFAULT_SOURCE_LANGUAGE}")
    _config_logger.debug(f"   DEFAULT_TARGET_LANGUAGE: {DEFAULT_TARGET_LANGUAGE}")
    _config_logger.debug(f"   HOST: {HOST}")
    _config_logger.debug(f"   PORT: {PORT}")
    _config_logger.debug(f"   OPENAI_API_KEY: {mask_api_key(OPENAI_API_KEY)}")
    _config_logger.debug("=" * 60)
