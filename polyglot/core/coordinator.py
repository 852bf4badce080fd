"""
Live translation coordinator.

Decides when the pipeline is called in response to continuous input and makes
sure the output only ever reflects the most recently issued request.

State machine per text field::

    IDLE --input (live)--> DEBOUNCING --delay elapsed--> IN_FLIGHT
    IN_FLIGHT --resolve, token current--> IDLE | FAILED
    IN_FLIGHT --resolve, token superseded--> (unchanged, result dropped)

Every issued cycle gets a fresh token written to
``state.pending_request_token``; a resolving cycle applies its result only if
its token still matches. All reads and writes happen on the event loop
thread, so no locking is needed.
"""
import asyncio
import itertools
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple

from polyglot.config import (
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    LIVE_TRANSLATE_DELAY_MS,
)
from polyglot.core.events import Event, EventBus, EventType
from polyglot.core.languages import AUTO_DETECT, LANGUAGE_NAMES
from polyglot.core.llm.exceptions import (
    InvalidInputError,
    SwapRefusedError,
    TranslationError,
)
from polyglot.core.models import (
    CoordinatorState,
    TranslationOutcome,
    TranslationRequest,
    TranslationStatus,
)
from polyglot.core.pipeline import RequestPipeline

logger = logging.getLogger(__name__)

CredentialProvider = Callable[[], Optional[str]]


class LiveTranslationCoordinator:
    """Debounces input, issues translation cycles and discards stale results."""

    def __init__(self, pipeline: RequestPipeline,
                 credential_provider: CredentialProvider,
                 event_bus: Optional[EventBus] = None,
                 source_language: str = DEFAULT_SOURCE_LANGUAGE,
                 target_language: str = DEFAULT_TARGET_LANGUAGE,
                 live_mode: bool = False,
                 debounce_delay: float = LIVE_TRANSLATE_DELAY_MS / 1000,
                 language_names: Optional[Mapping[str, str]] = None,
                 detect_on_auto: bool = True):
        """
        Args:
            pipeline: Request pipeline used for translation and detection
            credential_provider: Returns the API key to use for the next call
            event_bus: Bus receiving coordinator events (a private one if omitted)
            source_language: Initial source language code (or "auto")
            target_language: Initial target language code
            live_mode: Translate automatically after input pauses
            debounce_delay: Quiet period in seconds before a live translation
            language_names: Code to display-name mapping
            detect_on_auto: Run language detection after an "auto" translation
        """
        self.pipeline = pipeline
        self.event_bus = event_bus or EventBus()
        self.language_names = dict(language_names if language_names is not None else LANGUAGE_NAMES)
        self.debounce_delay = debounce_delay
        self.detect_on_auto = detect_on_auto
        self._credential_provider = credential_provider

        self._validate_pair(source_language, target_language)
        self.state = CoordinatorState(
            source_language=source_language,
            target_language=target_language,
            live_mode_enabled=live_mode
        )

        self.source_text = ''
        self.target_text = ''
        self.detected_language: Optional[str] = None
        self.status = TranslationStatus.IDLE
        self.status_message = ''

        self._tokens = itertools.count(1)
        self._last_issued_token = 0
        self._detection_epoch = 0
        self._debounce_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_source_text(self, text: str) -> None:
        """Input changed. In live mode this (re)starts the debounce timer."""
        self.source_text = text
        if not self.state.live_mode_enabled:
            return

        if not text.strip():
            self._cancel_debounce()
            self.state.pending_request_token = None
            self.target_text = ''
            self._set_status(TranslationStatus.IDLE, '')
            return

        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(
            self._debounce_then_translate()
        )
        self._set_status(TranslationStatus.DEBOUNCING, '')

    async def translate_now(self) -> TranslationOutcome:
        """Explicit translate request: skips the debounce and runs a cycle now."""
        self._cancel_debounce()
        token, request = self._issue()
        return await self._run_cycle(token, request)

    def set_languages(self, source_language: str, target_language: str) -> None:
        """
        Change the language pair.

        In live mode with text present a new cycle starts immediately.

        Raises:
            InvalidInputError: for an unsupported code or an "auto" target
        """
        self._validate_pair(source_language, target_language)
        if (source_language, target_language) == (self.state.source_language,
                                                   self.state.target_language):
            return

        self.state.source_language = source_language
        self.state.target_language = target_language
        self._reset_detection()
        self._publish(EventType.LANGUAGES_CHANGED, {
            'source_language': source_language,
            'target_language': target_language,
        })

        if self.state.live_mode_enabled and self.source_text.strip():
            self._trigger_now()

    def set_source_language(self, code: str) -> None:
        self.set_languages(code, self.state.target_language)

    def set_target_language(self, code: str) -> None:
        self.set_languages(self.state.source_language, code)

    def swap_languages(self) -> None:
        """
        Exchange languages and text buffers.

        Raises:
            SwapRefusedError: when the source language is "auto"; nothing changes
        """
        if self.state.source_language == AUTO_DETECT:
            raise SwapRefusedError()

        self._cancel_debounce()
        self.state.pending_request_token = None
        self.state.source_language, self.state.target_language = (
            self.state.target_language, self.state.source_language
        )
        self.source_text, self.target_text = self.target_text, self.source_text
        self._reset_detection()
        self._publish(EventType.LANGUAGES_CHANGED, {
            'source_language': self.state.source_language,
            'target_language': self.state.target_language,
            'swapped': True,
        })

        if self.state.live_mode_enabled and self.source_text.strip():
            self._trigger_now()

    def set_live_mode(self, enabled: bool) -> None:
        self.state.live_mode_enabled = enabled
        if not enabled:
            self._cancel_debounce()
            if self.status == TranslationStatus.DEBOUNCING:
                self._set_status(TranslationStatus.IDLE, '')

    def clear(self) -> None:
        """Empty both buffers and drop whatever is pending or in flight."""
        self._cancel_debounce()
        self.state.pending_request_token = None
        self.source_text = ''
        self.target_text = ''
        self._reset_detection()
        self._set_status(TranslationStatus.IDLE, '')
        self._publish(EventType.TEXT_CLEARED, {})

    def load_history_entry(self, entry: Any) -> None:
        """Restore a history entry's full texts into the buffers."""
        self._cancel_debounce()
        self.state.pending_request_token = None
        self.source_text = entry.full_source_text
        self.target_text = entry.full_translation
        self._reset_detection()
        self._publish(EventType.HISTORY_ENTRY_LOADED, {'id': entry.id})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait for the pending debounce and every spawned cycle to finish."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if self._timer_pending():
                pending.append(self._debounce_task)
            if not pending:
                return
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    raise result

    async def close(self) -> None:
        """Cancel the debounce timer and any outstanding cycles."""
        self._cancel_debounce()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def _issue(self) -> Tuple[int, TranslationRequest]:
        """Snapshot the buffers into a request and make its token current."""
        token = next(self._tokens)
        self._last_issued_token = token
        self.state.pending_request_token = token
        request = TranslationRequest(
            source_text=self.source_text.strip(),
            source_language=self.state.source_language,
            target_language=self.state.target_language,
            language_names=self.language_names
        )
        return token, request

    def _trigger_now(self) -> None:
        self._cancel_debounce()
        token, request = self._issue()
        self._spawn(self._run_cycle(token, request))

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _timer_pending(self) -> bool:
        return self._debounce_task is not None and not self._debounce_task.done()

    def _cancel_debounce(self) -> None:
        if self._timer_pending():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce_then_translate(self) -> None:
        await asyncio.sleep(self.debounce_delay)
        self._debounce_task = None
        token, request = self._issue()
        # Separate task: a later keystroke cancels only the timer, never the cycle
        self._spawn(self._run_cycle(token, request))

    def _is_current(self, token: int) -> bool:
        return self.state.pending_request_token == token

    async def _run_cycle(self, token: int, request: TranslationRequest) -> TranslationOutcome:
        self._set_status(TranslationStatus.IN_FLIGHT, 'Translating...')
        self._publish(EventType.TRANSLATION_STARTED, {
            'token': token,
            'source_language': request.source_language,
            'target_language': request.target_language,
        })
        credential = self._credential_provider()

        try:
            translation = await self.pipeline.translate(request, credential)
        except TranslationError as e:
            if not self._is_current(token):
                return self._discard(token)
            self.state.pending_request_token = None
            self.target_text = ''
            logger.warning(f"Translation failed: {e}")
            self._set_status(TranslationStatus.FAILED, f"Translation failed: {e.message}")
            self._publish(EventType.TRANSLATION_FAILED, {
                'token': token,
                'kind': e.kind.value if e.kind else None,
                'message': e.message,
            })
            return TranslationOutcome(token=token, error=e)

        if not self._is_current(token):
            return self._discard(token)

        self.state.pending_request_token = None
        self.target_text = translation
        # A newer keystroke's timer may already be running
        status = TranslationStatus.DEBOUNCING if self._timer_pending() else TranslationStatus.IDLE
        self._set_status(status, 'Translation completed')
        self._publish(EventType.TRANSLATION_COMPLETED, {
            'token': token,
            'source_text': request.source_text,
            'translation': translation,
            'source_language': request.source_language,
            'target_language': request.target_language,
        })

        if request.source_language == AUTO_DETECT and self.detect_on_auto:
            await self._detect_language(token, request.source_text, credential)

        return TranslationOutcome(token=token, translated_text=translation)

    def _discard(self, token: int) -> TranslationOutcome:
        logger.debug(f"Discarding superseded result for request {token} "
                     f"(current: {self.state.pending_request_token})")
        self._publish(EventType.TRANSLATION_SUPERSEDED, {'token': token})
        return TranslationOutcome(token=token, superseded=True)

    async def _detect_language(self, token: int, text: str, credential: Optional[str]) -> None:
        epoch = self._detection_epoch
        try:
            language = await self.pipeline.detect_language(text, credential)
        except TranslationError as e:
            logger.warning(f"Language detection failed: {e}")
            return

        if (token != self._last_issued_token
                or epoch != self._detection_epoch
                or self.state.source_language != AUTO_DETECT):
            logger.debug(f"Discarding stale detection for request {token}")
            return
        self.detected_language = language
        self._publish(EventType.LANGUAGE_DETECTED, {'token': token, 'language': language})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_pair(self, source_language: str, target_language: str) -> None:
        if source_language not in self.language_names:
            raise InvalidInputError(f"Unsupported source language: {source_language}")
        if target_language not in self.language_names or target_language == AUTO_DETECT:
            raise InvalidInputError(f"Unsupported target language: {target_language}")

    def _reset_detection(self) -> None:
        """Forget the detected language and invalidate any detection in flight."""
        self.detected_language = None
        self._detection_epoch += 1

    def _set_status(self, status: TranslationStatus, message: str) -> None:
        self.status = status
        self.status_message = message
        self._publish(EventType.STATUS_CHANGED, {'status': status.value, 'message': message})

    def _publish(self, event_type: EventType, data: Dict[str, Any]) -> None:
        self.event_bus.publish(Event(type=event_type, data=data, source="coordinator"))
