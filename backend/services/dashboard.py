"""Aggregate view used by the dashboard page."""

from datetime import datetime
from typing import Optional

from config import FEATURE_KEYS, get_settings, is_feature_enabled
from repositories import DocumentStore
from store import get_database
from utils import average, format_currency

from .analytics import list_analytics_events
from .email import list_email_campaigns
from .llm import get_usage_statistics
from .payments import get_pricing_table, get_subscription_for_user
from .voice import list_voice_sessions


def _renewal_date(iso: Optional[str]) -> Optional[str]:
    if not iso:
        return None
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return iso


def get_dashboard_snapshot(db: Optional[DocumentStore] = None) -> dict:
    db = db or get_database()
    users = db.get_users()
    user = db.find_user_by_email(get_settings().DEFAULT_USER_EMAIL) or (users[0] if users else None)
    subscription = get_subscription_for_user(user["id"], db) if user else None

    threads = []
    for thread in db.get_threads():
        messages = db.get_messages(thread["id"])
        threads.append({
            "id": thread["id"],
            "title": thread.get("title", ""),
            "messageCount": len(messages),
            "lastMessage": messages[-1]["content"] if messages else None,
            "avgMessageLength": round(average(len(m.get("content", "")) for m in messages)),
        })

    return {
        "featureFlags": {key: is_feature_enabled(key) for key in FEATURE_KEYS},
        "profile": {
            "name": (user or {}).get("name", "Demo User"),
            "email": (user or {}).get("email", "demo@example.com"),
            "role": (user or {}).get("role", "user"),
            "avatarUrl": (user or {}).get("avatarUrl"),
        },
        "subscription": {
            "productName": subscription["product"].get("name"),
            "status": subscription["subscription"].get("status"),
            "renewalDate": _renewal_date(subscription["subscription"].get("currentPeriodEnd")),
        } if subscription else None,
        "products": [
            {
                "id": p["id"],
                "name": p.get("name"),
                "description": p.get("description", ""),
                "price": format_currency(p.get("priceCents", 0)),
                "interval": p.get("interval"),
            }
            for p in get_pricing_table(db)
        ],
        "chatThreads": threads,
        "usage": get_usage_statistics(),
        "voiceSessions": list_voice_sessions(db),
        "analytics": list_analytics_events(db=db),
        "emailCampaigns": list_email_campaigns(),
    }

