"""
SQLite database manager for settings and translation history.
"""

import sqlite3
import os
import threading
from typing import Optional, Dict, List, Any

from polyglot.config import DATABASE_PATH


class Database:
    """
    Manages the SQLite database holding the saved API key and the history list.
    Thread-safe for concurrent access.
    """

    def __init__(self, db_path: str = DATABASE_PATH):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._local = threading.local()
        self._lock = threading.RLock()

        # Ensure directory exists
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Initialize schema
        self._initialize_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'connection') or self._local.connection is None:
            self._local.connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=30.0
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    def _initialize_schema(self):
        """Create database tables if they don't exist."""
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()

            # Key/value settings (saved API key)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            # Translation history, newest = highest id
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS translation_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    source_text TEXT NOT NULL,
                    translation TEXT NOT NULL,
                    full_source_text TEXT NOT NULL,
                    full_translation TEXT NOT NULL,
                    source_lang TEXT NOT NULL,
                    target_lang TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
            """)

            conn.commit()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_setting(self, key: str) -> Optional[str]:
        with self._lock:
            cursor = self._get_connection().cursor()
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row['value'] if row else None

    def set_setting(self, key: str, value: str) -> None:
        with self._lock:
            conn = self._get_connection()
            conn.execute("""
                INSERT INTO settings (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
            """, (key, value))
            conn.commit()

    def delete_setting(self, key: str) -> bool:
        """
        Remove a setting.

        Returns:
            True if a row was deleted
        """
        with self._lock:
            conn = self._get_connection()
            cursor = conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def insert_history(self, record: Dict[str, Any]) -> int:
        """
        Insert a history record.

        Args:
            record: Mapping with every translation_history column except id

        Returns:
            The new row id
        """
        with self._lock:
            conn = self._get_connection()
            cursor = conn.execute("""
                INSERT INTO translation_history
                (source_text, translation, full_source_text, full_translation,
                 source_lang, target_lang, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                record['source_text'],
                record['translation'],
                record['full_source_text'],
                record['full_translation'],
                record['source_lang'],
                record['target_lang'],
                record['timestamp'],
            ))
            conn.commit()
            return cursor.lastrowid

    def list_history(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """History records, newest first."""
        with self._lock:
            cursor = self._get_connection().cursor()
            if limit is None:
                cursor.execute("SELECT * FROM translation_history ORDER BY id DESC")
            else:
                cursor.execute(
                    "SELECT * FROM translation_history ORDER BY id DESC LIMIT ?",
                    (limit,)
                )
            return [dict(row) for row in cursor.fetchall()]

    def get_history(self, entry_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            cursor = self._get_connection().cursor()
            cursor.execute("SELECT * FROM translation_history WHERE id = ?", (entry_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

    def trim_history(self, keep: int) -> int:
        """
        Delete everything but the ``keep`` newest records.

        Returns:
            Number of deleted records
        """
        with self._lock:
            conn = self._get_connection()
            cursor = conn.execute("""
                DELETE FROM translation_history
                WHERE id NOT IN (
                    SELECT id FROM translation_history ORDER BY id DESC LIMIT ?
                )
            """, (keep,))
            conn.commit()
            return cursor.rowcount

    def clear_history(self) -> int:
        with self._lock:
            conn = self._get_connection()
            cursor = conn.execute("DELETE FROM translation_history")
            conn.commit()
            return cursor.rowcount

    def close(self):
        """Close the current thread's connection."""
        connection = getattr(self._local, 'connection', None)
        if connection is not None:
            connection.close()
            self._local.connection = None
