"""Storage layer for LingoSphere.

Provides the key-value interface, its SQLite implementation and the session
store that persists one record per user on top of it.
"""

from pathlib import Path

from .base import KeyValueStore
from .sqlite import SQLiteKeyValueStore
from .session_store import SessionStore, record_key
from .migrations import recover_interrupted, upgrade_record
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interface
    "KeyValueStore",
    # SQLite implementation
    "SQLiteKeyValueStore",
    # Session persistence
    "SessionStore",
    "record_key",
    "recover_interrupted",
    "upgrade_record",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_key_value_store",
    "get_session_store",
]


def get_key_value_store(db_path: Path = DEFAULT_DB_PATH) -> KeyValueStore:
    """Get a key-value store instance."""
    return SQLiteKeyValueStore(db_path)


def get_session_store(db_path: Path = DEFAULT_DB_PATH) -> SessionStore:
    """Get a session store backed by SQLite, creating the schema if needed."""
    init_schema(db_path)
    return SessionStore(SQLiteKeyValueStore(db_path))
