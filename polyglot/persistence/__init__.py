"""
Persistence module for the saved API key and translation history.
"""

from .database import Database
from .history import HistoryEntry, HistoryStore

__all__ = ['Database', 'HistoryEntry', 'HistoryStore']
