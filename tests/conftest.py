"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and configuration for all test modules.
"""

import sys
import asyncio
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest

from polyglot.config import REQUEST_TIMEOUT
from polyglot.core.events import EventBus, EventType
from polyglot.core.llm.base import LLMProvider, LLMResponse
from polyglot.persistence.database import Database

VALID_API_KEY = "sk-test-0123456789abcdef"


class ScriptedProvider(LLMProvider):
    """
    Provider that replays a script instead of calling the network.

    Each call consumes the next result: a string is returned as the content,
    an exception is raised, and an asyncio.Future is awaited first (so a test
    can decide when, and in which order, calls resolve). An exhausted script
    returns an empty reply.
    """

    def __init__(self, *results):
        super().__init__(model="test-model")
        self.results = list(results)
        self.calls = []

    async def generate(self, messages, api_key, max_tokens, temperature,
                       timeout=REQUEST_TIMEOUT):
        self.calls.append({
            "messages": messages,
            "api_key": api_key,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "timeout": timeout,
        })
        result = self.results.pop(0) if self.results else ""
        if isinstance(result, asyncio.Future):
            result = await result
        if isinstance(result, BaseException):
            raise result
        return LLMResponse(content=result)

    @property
    def user_messages(self):
        return [call["messages"][-1]["content"] for call in self.calls]


class EventRecorder:
    """Subscribes to every event type on a bus and keeps what it receives."""

    def __init__(self, event_bus):
        self.events = []
        event_bus.subscribe_multiple(list(EventType), self.events.append)

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]


class SleepRecorder:
    """Stand-in for asyncio.sleep that records the requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def api_key():
    """A structurally valid API key."""
    return VALID_API_KEY


@pytest.fixture
def scripted_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite database in a temporary directory."""
    db = Database(str(tmp_path / "data" / "test.db"))
    yield db
    db.close()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def published(event_bus):
    """Everything published on ``event_bus``."""
    return EventRecorder(event_bus)
