"""Product analytics events."""

from typing import Any, Optional

from config import get_settings
from repositories import DocumentStore
from store import get_database


def track_event(
    name: str,
    payload: Optional[dict[str, Any]] = None,
    user_id: Optional[str] = None,
    db: Optional[DocumentStore] = None,
) -> dict:
    db = db or get_database()
    event = {"name": name, "payload": payload or {}}
    if user_id:
        event["userId"] = user_id
    return db.add_analytics_event(event)


def list_analytics_events(limit: Optional[int] = None, db: Optional[DocumentStore] = None) -> list[dict]:
    """Most recent first."""
    db = db or get_database()
    limit = limit if limit is not None else get_settings().ANALYTICS_RECENT_LIMIT
    events = db.get_analytics_events()
    return list(reversed(events[-limit:])) if limit > 0 else []
