"""
Retry policy with exponential backoff.

The policy is a pure function from (attempt, error) to a RetryDecision, so
backoff behavior can be tested without any network mocking. The pipeline owns
the loop and the sleeping.
"""

from dataclasses import dataclass
from typing import NamedTuple

from polyglot.config import (
    MAX_TRANSLATION_ATTEMPTS,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_BACKOFF_FACTOR,
)
from .exceptions import TransientError


class RetryDecision(NamedTuple):
    """Whether to retry, and how long to wait first."""
    retry: bool
    delay_ms: int = 0

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000


NO_RETRY = RetryDecision(retry=False)


@dataclass
class RetryPolicy:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Total attempts including the first one
        initial_delay: Delay in seconds before the first retry
        backoff_factor: Multiplier applied for every further retry
    """
    max_attempts: int = MAX_TRANSLATION_ATTEMPTS
    initial_delay: float = RETRY_BASE_DELAY_SECONDS
    backoff_factor: float = RETRY_BACKOFF_FACTOR

    def backoff_delay_ms(self, attempt: int) -> int:
        """Delay before retry ``attempt`` (0-indexed): initial * factor^attempt."""
        return int(round(self.initial_delay * (self.backoff_factor ** attempt) * 1000))

    def decide(self, attempt: int, error: Exception) -> RetryDecision:
        """
        Decide what to do after ``attempt`` (0-indexed) failed with ``error``.

        Only transient errors are retried, and never after the final attempt.
        """
        if not isinstance(error, TransientError):
            return NO_RETRY
        if attempt + 1 >= self.max_attempts:
            return NO_RETRY
        return RetryDecision(retry=True, delay_ms=self.backoff_delay_ms(attempt))


@dataclass
class RetryState:
    """Attempt bookkeeping for one logical request, retries included."""
    max_attempts: int
    attempt: int = 0

    @property
    def attempt_number(self) -> int:
        """1-based attempt number, for logging."""
        return self.attempt + 1

    def advance(self) -> None:
        self.attempt += 1
