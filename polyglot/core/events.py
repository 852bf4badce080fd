"""
Event system connecting the coordinator to its collaborators.

The coordinator publishes; UI sinks and the history store subscribe. Nothing
here knows about any particular UI toolkit.
"""

from enum import Enum
from dataclasses import dataclass, field
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List
import logging
import time

logger = logging.getLogger(__name__)

Listener = Callable[["Event"], None]


class EventType(Enum):
    """Coordinator event types."""

    # Translation cycle
    TRANSLATION_STARTED = "translation_started"
    TRANSLATION_COMPLETED = "translation_completed"
    TRANSLATION_FAILED = "translation_failed"
    TRANSLATION_SUPERSEDED = "translation_superseded"

    # Detection
    LANGUAGE_DETECTED = "language_detected"

    # State changes
    STATUS_CHANGED = "status_changed"
    LANGUAGES_CHANGED = "languages_changed"
    TEXT_CLEARED = "text_cleared"
    HISTORY_ENTRY_LOADED = "history_entry_loaded"


@dataclass
class Event:
    """Coordinator event.

    Attributes:
        type: Event type
        data: Event-specific data dictionary
        timestamp: Unix timestamp when event occurred
        source: Optional source identifier (e.g., "coordinator")
    """
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    source: str = "unknown"


class EventBus:
    """Synchronous publish/subscribe bus.

    Listeners run in subscription order on the publisher's thread. A failing
    listener is logged and skipped so the remaining listeners and the
    publisher are unaffected.
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[Listener]] = defaultdict(list)

    def subscribe(self, event_type: EventType, callback: Listener) -> None:
        self._listeners[event_type].append(callback)

    def subscribe_multiple(self, event_types: Iterable[EventType], callback: Listener) -> None:
        """Subscribe one callback to several event types."""
        for event_type in event_types:
            self.subscribe(event_type, callback)

    def publish(self, event: Event) -> None:
        for listener in list(self._listeners.get(event.type, ())):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Event listener failed for {event.type.value}")
