"""
Supported languages and their speech locales.

Language codes are the short semantic codes used throughout the application
(``en``, ``vi``...). ``auto`` asks the remote model to detect the source
language and is only valid on the source side.
"""
from typing import Dict, Mapping, Optional

AUTO_DETECT = 'auto'

# Display names sent to the model and shown in history
LANGUAGE_NAMES: Dict[str, str] = {
    'auto': 'Auto Detect',
    'en': 'English',
    'vi': 'Vietnamese',
    'ja': 'Japanese',
    'de': 'German',
    'zh': 'Chinese',
}

# Locale-qualified variants for speech recognition and synthesis
SPEECH_LOCALES: Dict[str, str] = {
    'en': 'en-US',
    'vi': 'vi-VN',
    'ja': 'ja-JP',
    'de': 'de-DE',
    'zh': 'zh-CN',
}

FALLBACK_SPEECH_LOCALE = 'en-US'


def get_language_name(code: str, language_names: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve a language code to its display name.

    Unknown codes are returned unchanged so a prompt can still name them.
    """
    names = LANGUAGE_NAMES if language_names is None else language_names
    return names.get(code, code)


def is_supported_source(code: str) -> bool:
    return code in LANGUAGE_NAMES


def is_supported_target(code: str) -> bool:
    return code in LANGUAGE_NAMES and code != AUTO_DETECT


def recognition_locale(code: str) -> str:
    """Locale for speech-to-text. ``auto`` falls back to en-US."""
    if code == AUTO_DETECT:
        return FALLBACK_SPEECH_LOCALE
    return SPEECH_LOCALES.get(code, FALLBACK_SPEECH_LOCALE)


def synthesis_locale(code: str) -> str:
    """Locale for text-to-speech."""
    if code == AUTO_DETECT:
        return FALLBACK_SPEECH_LOCALE
    return SPEECH_LOCALES.get(code, FALLBACK_SPEECH_LOCALE)
