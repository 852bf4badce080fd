"""
Core translation modules

    RequestPipeline            -- one request in, one classified outcome out
    LiveTranslationCoordinator -- debounce and stale-result suppression
"""
from .pipeline import RequestPipeline
from .coordinator import LiveTranslationCoordinator
from .models import TranslationRequest, TranslationOutcome, TranslationStatus

__all__ = [
    'RequestPipeline',
    'LiveTranslationCoordinator',
    'TranslationRequest',
    'TranslationOutcome',
    'TranslationStatus',
]
