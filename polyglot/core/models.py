"""
Data structures shared by the pipeline, the coordinator and the host surfaces.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from polyglot.core.languages import LANGUAGE_NAMES
from polyglot.core.llm.exceptions import FailureKind, TranslationError


@dataclass(frozen=True)
class TranslationRequest:
    """One translation call's input.

    Attributes:
        source_text: Text to translate
        source_language: Language code, or "auto" to let the model detect it
        target_language: Language code to translate into
        language_names: Code to display-name mapping used in the prompt
    """
    source_text: str
    source_language: str
    target_language: str
    language_names: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(LANGUAGE_NAMES))
    )


class TranslationStatus(Enum):
    """Observable state of the coordinator's output field."""
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    FAILED = "failed"


@dataclass
class CoordinatorState:
    """Language pair, live mode and the token of the latest issued request."""
    source_language: str
    target_language: str
    live_mode_enabled: bool = False
    pending_request_token: Optional[int] = None


@dataclass
class TranslationOutcome:
    """Result of one coordinator cycle.

    Exactly one of ``translated_text`` / ``error`` is set unless the cycle was
    superseded, in which case neither was applied to the output.
    """
    token: int
    translated_text: Optional[str] = None
    error: Optional[TranslationError] = None
    superseded: bool = False

    @property
    def ok(self) -> bool:
        return not self.superseded and self.error is None

    @property
    def failure_kind(self) -> Optional[FailureKind]:
        if self.superseded:
            return FailureKind.SUPERSEDED
        if self.error is not None:
            return self.error.kind
        return None
