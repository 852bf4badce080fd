"""
Prompt construction for translation and language detection.
"""
from typing import Dict, List, NamedTuple

from polyglot.config import (
    DETECTION_SAMPLE_LENGTH,
    MAX_TRANSLATION_TOKENS,
    MIN_TRANSLATION_TOKENS,
    TOKENS_PER_SOURCE_CHAR,
)
from polyglot.core.languages import AUTO_DETECT, get_language_name
from polyglot.core.models import TranslationRequest


class PromptPair(NamedTuple):
    """A pair of system and user prompts for one chat completion."""
    system: str
    user: str

    def to_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


TRANSLATION_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the given text accurately "
    "while preserving the meaning and tone. Only return the translation without "
    "any additional text or explanations."
)

DETECTION_SYSTEM_PROMPT = (
    "You are a language detection expert. Identify the language of the given "
    "text and respond with only the language name in English (e.g., \"English\", "
    "\"Vietnamese\", \"Japanese\", \"German\", \"Chinese\")."
)


def compute_max_tokens(source_text: str) -> int:
    """Response budget: clamp(len(text) * 2, 100, 1000)."""
    budget = len(source_text) * TOKENS_PER_SOURCE_CHAR
    return min(MAX_TRANSLATION_TOKENS, max(MIN_TRANSLATION_TOKENS, budget))


def build_translation_prompt(request: TranslationRequest) -> PromptPair:
    """
    Build the system/user prompts for a translation request.

    With an "auto" source the model is told to detect the language itself and
    to pass text through unchanged when it is already in the target language.
    """
    target_name = get_language_name(request.target_language, request.language_names)

    if request.source_language == AUTO_DETECT:
        user = (
            f"Translate the following text to {target_name}. If the source language "
            f"is already {target_name}, just return the original text. "
            f"Only return the translation, nothing else:\n\n{request.source_text}"
        )
    else:
        source_name = get_language_name(request.source_language, request.language_names)
        user = (
            f"Translate the following {source_name} text to {target_name}. "
            f"Only return the translation, nothing else:\n\n{request.source_text}"
        )

    return PromptPair(system=TRANSLATION_SYSTEM_PROMPT, user=user)


def truncate_for_detection(text: str) -> str:
    return text[:DETECTION_SAMPLE_LENGTH]


def build_detection_prompt(text: str) -> PromptPair:
    """Detection only needs a sample; the user message is the first 500 characters."""
    return PromptPair(system=DETECTION_SYSTEM_PROMPT, user=truncate_for_detection(text))
