"""
Ledger Persistence Layer
Process-wide handle to the JSON document store.

Structure on disk (DATABASE_FILE, default data/database.json):
  {
    "users": [...], "products": [...], "subscriptions": [...],
    "threads": [...], "messages": [...], "auditLogs": [...],
    "knowledgeBase": [...], "voiceSessions": [...], "analyticsEvents": [...]
  }

get_database() builds the handle from the configured path on first use.
reset_database() drops it so the next call rebuilds (new path, test isolation).
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from config import get_settings
from repositories import DocumentStore, SnapshotFile, default_schema, resolve_database_path

logger = logging.getLogger(__name__)

_database: Optional[DocumentStore] = None
_lock = threading.Lock()


def database_path() -> Path:
    return resolve_database_path(get_settings().DATABASE_FILE)


def get_database() -> DocumentStore:
    global _database
    with _lock:
        if _database is None:
            path = database_path()
            logger.info("Opening document store at %s", path)
            _database = DocumentStore(path)
        return _database


def reset_database() -> None:
    global _database
    with _lock:
        _database = None


def reload_database() -> DocumentStore:
    """Force the current handle to re-read storage."""
    db = get_database()
    db.reload()
    return db


def initialize_database(reset: bool = False) -> Path:
    """Write an empty snapshot if none exists (or unconditionally with reset=True)."""
    path = database_path()
    snapshot = SnapshotFile(path)
    if reset or not snapshot.exists():
        snapshot.save(default_schema())
        logger.info("Initialized empty snapshot at %s", path)
        if _database is not None and _database.path == path:
            _database.reload()
    return path
