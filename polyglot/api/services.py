"""
Service container handed to the route blueprints.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional

from polyglot.config import API_ENDPOINT, DATABASE_PATH, DEFAULT_MODEL
from polyglot.core.credentials import CredentialStore
from polyglot.core.llm.providers.openai import OpenAICompatibleProvider
from polyglot.core.pipeline import RequestPipeline
from polyglot.persistence.database import Database
from polyglot.persistence.history import HistoryStore


def default_pipeline_factory() -> RequestPipeline:
    return RequestPipeline(OpenAICompatibleProvider(api_endpoint=API_ENDPOINT, model=DEFAULT_MODEL))


@dataclass
class AppServices:
    """Collaborators shared by every request.

    Attributes:
        database: SQLite store for settings and history
        credentials: Saved API key
        history: Translation history
        pipeline_factory: Builds a fresh pipeline for each request; each
            request runs in its own event loop, so HTTP clients are not shared
    """
    database: Database
    credentials: CredentialStore
    history: HistoryStore
    pipeline_factory: Callable[[], RequestPipeline] = field(default=default_pipeline_factory)

    @classmethod
    def create(cls, db_path: str = DATABASE_PATH,
               pipeline_factory: Optional[Callable[[], RequestPipeline]] = None,
               fallback_key: Optional[str] = None) -> "AppServices":
        database = Database(db_path)
        credentials = (CredentialStore(database) if fallback_key is None
                       else CredentialStore(database, fallback_key=fallback_key))
        return cls(
            database=database,
            credentials=credentials,
            history=HistoryStore(database),
            pipeline_factory=pipeline_factory or default_pipeline_factory
        )
