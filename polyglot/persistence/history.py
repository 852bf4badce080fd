"""
Bounded, newest-first translation history.
"""
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from polyglot.config import HISTORY_MAX_ITEMS, HISTORY_SNIPPET_LENGTH
from polyglot.core.events import Event, EventBus, EventType
from polyglot.core.languages import LANGUAGE_NAMES, get_language_name
from .database import Database

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    """One past translation.

    ``source_text`` and ``translation`` are display snippets; the full texts
    are kept alongside for restoring the entry. Languages are display names.
    """
    id: int
    source_text: str
    translation: str
    full_source_text: str
    full_translation: str
    source_lang: str
    target_lang: str
    timestamp: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "HistoryEntry":
        return cls(**{name: row[name] for name in cls.__dataclass_fields__})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class HistoryStore:
    """Records completed translations, keeping only the newest ``max_items``."""

    def __init__(self, database: Database,
                 language_names: Optional[Mapping[str, str]] = None,
                 max_items: int = HISTORY_MAX_ITEMS,
                 snippet_length: int = HISTORY_SNIPPET_LENGTH):
        self.database = database
        self.language_names = language_names if language_names is not None else LANGUAGE_NAMES
        self.max_items = max_items
        self.snippet_length = snippet_length

    def add(self, source_text: str, translation: str,
            source_lang: str, target_lang: str) -> HistoryEntry:
        """
        Record a translation and trim the list to ``max_items``.

        Args:
            source_text: Full source text
            translation: Full translated text
            source_lang: Source language code
            target_lang: Target language code

        Returns:
            The stored entry
        """
        record = {
            'source_text': source_text[:self.snippet_length],
            'translation': translation[:self.snippet_length],
            'full_source_text': source_text,
            'full_translation': translation,
            'source_lang': get_language_name(source_lang, self.language_names),
            'target_lang': get_language_name(target_lang, self.language_names),
            'timestamp': datetime.now().isoformat(timespec='seconds'),
        }
        entry_id = self.database.insert_history(record)
        removed = self.database.trim_history(self.max_items)
        if removed:
            logger.debug(f"History trimmed by {removed} entr{'y' if removed == 1 else 'ies'}")
        return HistoryEntry(id=entry_id, **record)

    def list(self) -> List[HistoryEntry]:
        """Entries, newest first."""
        return [HistoryEntry.from_row(row) for row in self.database.list_history(self.max_items)]

    def get(self, entry_id: int) -> Optional[HistoryEntry]:
        row = self.database.get_history(entry_id)
        return HistoryEntry.from_row(row) if row else None

    def clear(self) -> int:
        return self.database.clear_history()

    def attach(self, event_bus: EventBus) -> None:
        """Record every completed translation published on ``event_bus``."""
        event_bus.subscribe(EventType.TRANSLATION_COMPLETED, self._on_translation_completed)

    def _on_translation_completed(self, event: Event) -> None:
        data = event.data
        self.add(
            data['source_text'],
            data['translation'],
            data['source_language'],
            data['target_language'],
        )
