"""
Exception hierarchy for the request pipeline.

Every failure the pipeline can produce is a TranslationError tagged with a
FailureKind, so callers can either catch by class or switch on the kind.
"""

from enum import Enum
from typing import Optional, Dict, Any


class FailureKind(Enum):
    """Classification of a failed request."""
    INVALID_INPUT = "invalid_input"
    UNAUTHENTICATED = "unauthenticated"
    TRANSIENT = "transient"
    REMOTE_REJECTED = "remote_rejected"
    SUPERSEDED = "superseded"  # bookkeeping only, never raised


class TranslationError(Exception):
    """Base exception for all translation-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context about the error
        recoverable: Whether retrying the same request may succeed
    """

    kind: Optional[FailureKind] = None

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base += f" (context: {context_str})"
        return base


class InvalidInputError(TranslationError):
    """Raised locally when required text is empty or a value is unsupported."""

    kind = FailureKind.INVALID_INPUT

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context, recoverable=False)


class UnauthenticatedError(TranslationError):
    """Raised locally when the API key is missing or malformed.

    This is NOT recoverable without user intervention.
    """

    kind = FailureKind.UNAUTHENTICATED

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context, recoverable=False)


class TransientError(TranslationError):
    """Timeout, connection failure or 5xx response.

    This is recoverable by retrying the request unchanged.
    """

    kind = FailureKind.TRANSIENT

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        super().__init__(message, ctx, recoverable=True)
        self.status_code = status_code


class RetryExhaustedError(TransientError):
    """Raised when all retry attempts have been exhausted.

    Attributes:
        original_error: The last transient error
        attempts: Number of attempts made
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        attempts: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if original_error:
            ctx['original_error'] = str(original_error)
            ctx['original_error_type'] = type(original_error).__name__
        if attempts is not None:
            ctx['attempts'] = attempts
        status_code = getattr(original_error, 'status_code', None)
        super().__init__(message, status_code=status_code, context=ctx)
        self.recoverable = False
        self.original_error = original_error
        self.attempts = attempts


class RemoteRejectedError(TranslationError):
    """4xx response: bad request, bad key, quota exceeded. Never retried.

    Attributes:
        status_code: HTTP status returned by the remote service
        remote_message: ``error.message`` from the response body, if any
    """

    kind = FailureKind.REMOTE_REJECTED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        remote_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        super().__init__(message, ctx, recoverable=False)
        self.status_code = status_code
        self.remote_message = remote_message


class SwapRefusedError(RemoteRejectedError):
    """Raised locally when swapping languages while the source is auto-detect."""

    def __init__(self, message: str = "Cannot swap when auto-detect is enabled"):
        super().__init__(message)
