"""
LLM provider layer: transport, failure taxonomy and retry policy.
"""

from .base import LLMProvider, LLMResponse
from .exceptions import (
    FailureKind,
    TranslationError,
    InvalidInputError,
    UnauthenticatedError,
    TransientError,
    RetryExhaustedError,
    RemoteRejectedError,
    SwapRefusedError,
)
from .retry import RetryDecision, RetryPolicy, RetryState
from .providers import OpenAICompatibleProvider

__all__ = [
    'LLMProvider',
    'LLMResponse',
    'OpenAICompatibleProvider',
    'FailureKind',
    'TranslationError',
    'InvalidInputError',
    'UnauthenticatedError',
    'TransientError',
    'RetryExhaustedError',
    'RemoteRejectedError',
    'SwapRefusedError',
    'RetryDecision',
    'RetryPolicy',
    'RetryState',
]
