"""
API key validation and storage.
"""
import logging
from typing import Optional

from polyglot.config import API_KEY_PREFIX, OPENAI_API_KEY, mask_api_key
from polyglot.core.llm.exceptions import InvalidInputError
from polyglot.persistence.database import Database

logger = logging.getLogger(__name__)

API_KEY_SETTING = 'openai-api-key'


def is_valid_api_key(api_key: Optional[str]) -> bool:
    """Cheap structural check: non-empty after trimming and ``sk-`` prefixed."""
    if not api_key or not isinstance(api_key, str):
        return False
    stripped = api_key.strip()
    return len(stripped) > 0 and stripped.startswith(API_KEY_PREFIX)


class CredentialStore:
    """Holds the user's API key, persisted in the settings table.

    A saved key takes precedence over the one configured in the environment.
    """

    def __init__(self, database: Database, fallback_key: Optional[str] = OPENAI_API_KEY):
        self.database = database
        self.fallback_key = (fallback_key or '').strip()

    def get_api_key(self) -> str:
        """Saved key, else the environment key, else an empty string."""
        stored = self.database.get_setting(API_KEY_SETTING)
        if stored:
            return stored
        return self.fallback_key

    def has_api_key(self) -> bool:
        return is_valid_api_key(self.get_api_key())

    def save_api_key(self, api_key: str) -> str:
        """
        Validate and persist a key.

        Raises:
            InvalidInputError: if the key is structurally invalid
        """
        if not is_valid_api_key(api_key):
            raise InvalidInputError("Please enter a valid API key")
        api_key = api_key.strip()
        self.database.set_setting(API_KEY_SETTING, api_key)
        logger.info(f"API key saved ({mask_api_key(api_key)})")
        return api_key

    def clear_api_key(self) -> bool:
        removed = self.database.delete_setting(API_KEY_SETTING)
        if removed:
            logger.info("Saved API key removed")
        return removed
