"""
Resilient request pipeline for translation and language detection.

One call in, one resolved outcome out: the pipeline validates input locally,
issues the chat completion through a provider, retries transient failures
with exponential backoff and surfaces everything else immediately.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from polyglot.config import (
    DETECTION_MAX_TOKENS,
    DETECTION_TEMPERATURE,
    REQUEST_TIMEOUT,
    TRANSLATION_TEMPERATURE,
)
from polyglot.core.credentials import is_valid_api_key
from polyglot.core.llm.base import LLMProvider
from polyglot.core.llm.exceptions import (
    InvalidInputError,
    RetryExhaustedError,
    TransientError,
    UnauthenticatedError,
)
from polyglot.core.llm.providers.openai import OpenAICompatibleProvider
from polyglot.core.llm.retry import RetryPolicy, RetryState
from polyglot.core.models import TranslationRequest
from polyglot.core.prompts import (
    PromptPair,
    build_detection_prompt,
    build_translation_prompt,
    compute_max_tokens,
)

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = 'Unknown'

SleepFunc = Callable[[float], Awaitable[None]]


class RequestPipeline:
    """Turns translation and detection requests into a single resolved result."""

    def __init__(self, provider: Optional[LLMProvider] = None,
                 retry_policy: Optional[RetryPolicy] = None,
                 timeout: float = REQUEST_TIMEOUT,
                 sleep: SleepFunc = asyncio.sleep):
        """
        Args:
            provider: Chat-completion provider (defaults to the OpenAI-compatible one)
            retry_policy: Backoff policy for transient failures
            timeout: Hard per-attempt timeout in seconds
            sleep: Awaitable used between attempts
        """
        self.provider = provider or OpenAICompatibleProvider()
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self._sleep = sleep

    async def translate(self, request: TranslationRequest, credential: Optional[str]) -> str:
        """
        Translate ``request.source_text``.

        Returns:
            The translated text, stripped. An empty string is a valid result.

        Raises:
            UnauthenticatedError, InvalidInputError: before any network call
            RemoteRejectedError: on a 4xx response
            RetryExhaustedError: when every attempt failed transiently
        """
        self._check_preconditions(credential, request.source_text,
                                  "Source text is required")
        prompt = build_translation_prompt(request)
        return await self._execute(
            prompt,
            credential,
            max_tokens=compute_max_tokens(request.source_text),
            temperature=TRANSLATION_TEMPERATURE,
            operation="translate"
        )

    async def detect_language(self, text: str, credential: Optional[str]) -> str:
        """
        Identify the language of ``text`` (only its first 500 characters are sent).

        Returns:
            The bare English language name, or "Unknown" for an empty reply
        """
        self._check_preconditions(credential, text,
                                  "Text is required for language detection")
        prompt = build_detection_prompt(text)
        detected = await self._execute(
            prompt,
            credential,
            max_tokens=DETECTION_MAX_TOKENS,
            temperature=DETECTION_TEMPERATURE,
            operation="detect_language"
        )
        return detected or UNKNOWN_LANGUAGE

    async def close(self) -> None:
        await self.provider.close()

    @staticmethod
    def _check_preconditions(credential: Optional[str], text: Optional[str],
                             empty_message: str) -> None:
        if not is_valid_api_key(credential):
            raise UnauthenticatedError("API key not set or invalid")
        if not text or not text.strip():
            raise InvalidInputError(empty_message)

    async def _execute(self, prompt: PromptPair, credential: str, max_tokens: int,
                       temperature: float, operation: str) -> str:
        """Shared transport: attempt, classify, back off, retry."""
        state = RetryState(max_attempts=self.retry_policy.max_attempts)
        messages = prompt.to_messages()
        api_key = credential.strip()

        while True:
            try:
                response = await self.provider.generate(
                    messages,
                    api_key=api_key,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    timeout=self.timeout
                )
            except TransientError as e:
                decision = self.retry_policy.decide(state.attempt, e)
                if not decision.retry:
                    logger.error(
                        f"{operation} failed after {state.attempt_number} attempt(s): {e.message}"
                    )
                    raise RetryExhaustedError(
                        e.message,
                        original_error=e,
                        attempts=state.attempt_number
                    ) from e
                logger.warning(
                    f"{operation} failed (attempt {state.attempt_number}/{state.max_attempts}), "
                    f"retrying in {decision.delay_seconds:.1f}s: {e.message}"
                )
                await self._sleep(decision.delay_seconds)
                state.advance()
                continue

            if state.attempt > 0:
                logger.info(f"{operation} succeeded after {state.attempt_number} attempts")
            logger.debug(
                f"{operation} used {response.prompt_tokens} prompt + "
                f"{response.completion_tokens} completion tokens"
            )
            return response.content
