"""
Unit tests for the SQLite-backed history store.
"""
import pytest

from polyglot.core.events import Event, EventBus, EventType
from polyglot.persistence.history import HistoryEntry, HistoryStore


@pytest.fixture
def history(database):
    return HistoryStore(database)


class TestHistoryStore:

    def test_add_and_list(self, history):
        entry = history.add("Hallo", "Hello", "de", "en")

        entries = history.list()
        assert entries == [entry]
        assert entry.source_lang == "German"
        assert entry.target_lang == "English"
        assert entry.timestamp

    def test_auto_source_uses_display_name(self, history):
        entry = history.add("Hallo", "Hello", "auto", "en")
        assert entry.source_lang == "Auto Detect"

    def test_newest_first(self, history):
        for i in range(3):
            history.add(f"text {i}", f"translation {i}", "en", "de")

        assert [e.source_text for e in history.list()] == ["text 2", "text 1", "text 0"]

    def test_bounded_to_twenty(self, history):
        for i in range(25):
            history.add(f"text {i}", f"translation {i}", "en", "de")

        entries = history.list()
        assert len(entries) == 20
        assert entries[0].source_text == "text 24"
        assert entries[-1].source_text == "text 5"

    def test_custom_bound(self, database):
        history = HistoryStore(database, max_items=2)
        for i in range(4):
            history.add(f"text {i}", "t", "en", "de")

        assert [e.source_text for e in history.list()] == ["text 3", "text 2"]

    def test_snippets_and_full_text(self, history):
        source = "s" * 150
        translation = "t" * 120
        entry = history.add(source, translation, "en", "ja")

        stored = history.get(entry.id)
        assert stored.source_text == "s" * 100
        assert stored.translation == "t" * 100
        assert stored.full_source_text == source
        assert stored.full_translation == translation

    def test_get_missing(self, history):
        assert history.get(12345) is None

    def test_clear(self, history):
        history.add("a", "b", "en", "de")
        history.add("c", "d", "en", "de")

        assert history.clear() == 2
        assert history.list() == []

    def test_entry_to_dict(self, history):
        entry = history.add("Hallo", "Hello", "de", "en")
        data = entry.to_dict()

        assert data["id"] == entry.id
        assert data["source_lang"] == "German"
        assert HistoryEntry(**data) == entry


class TestHistoryEvents:

    def test_attach_records_completed_translations(self, history):
        bus = EventBus()
        history.attach(bus)

        bus.publish(Event(type=EventType.TRANSLATION_COMPLETED, data={
            "token": 1,
            "source_text": "Xin chào",
            "translation": "Hello",
            "source_language": "vi",
            "target_language": "en",
        }))
        bus.publish(Event(type=EventType.TRANSLATION_FAILED, data={"token": 2}))

        entries = history.list()
        assert len(entries) == 1
        assert entries[0].source_lang == "Vietnamese"
