#!/usr/bin/env python3
"""
Seed demo data: demo user, pricing plans, a subscription, a welcome thread,
audit log entries, analytics events, a voice session and a welcome email.
Safe to re-run: keyed records are upserted, the welcome messages are only
written once.

Run: python scripts/seed.py
"""

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import get_settings, is_feature_enabled  # noqa: E402
from services.analytics import track_event  # noqa: E402
from services.auth import ensure_demo_user  # noqa: E402
from services.email import send_transactional_email  # noqa: E402
from services.voice import transcribe_audio  # noqa: E402
from store import get_database, initialize_database  # noqa: E402
from utils import create_id, format_currency  # noqa: E402

logger = logging.getLogger("seed")

WELCOME_THREAD = "Welcome to the AI boilerplate"


def seed() -> dict:
    initialize_database()
    db = get_database()
    settings = get_settings()

    with db.transaction():
        founder = ensure_demo_user(db)

        logger.info("  • Ensuring pricing plans")
        db.upsert_product({
            "name": "Starter",
            "description": "Launch with authentication, chat, and payments in minutes.",
            "priceCents": 2900,
            "interval": "month",
        })
        pro = db.upsert_product({
            "name": "Pro",
            "description": "Unlock voice, analytics, and advanced workflows.",
            "priceCents": 9900,
            "interval": "month",
        })

        logger.info("  • Assigning subscription to demo user")
        period_end = datetime.now(timezone.utc) + timedelta(days=28)
        db.upsert_subscription({
            "userId": founder["id"],
            "productId": pro["id"],
            "status": "active",
            "currentPeriodEnd": period_end.isoformat().replace("+00:00", "Z"),
        })

        logger.info("  • Bootstrapping welcome chat thread")
        thread = db.upsert_thread({"title": WELCOME_THREAD, "ownerId": founder["id"]})
        if not db.get_messages(thread["id"]):
            for role, content in (
                ("system", "You are a friendly AI onboarding specialist for the boilerplate."),
                ("user", "Give me a tour of what this starter kit unlocks."),
                ("assistant", "Welcome aboard! Explore the live dashboard to try chat, payments, "
                              "analytics, and voice without writing any code."),
            ):
                db.add_message({"threadId": thread["id"], "role": role, "content": content})

        logger.info("  • Recording audit log entries")
        db.add_audit_log({
            "actorId": founder["id"],
            "action": "user.login",
            "target": founder["email"],
            "metadata": {"via": "seed-script"},
        })
        db.add_audit_log({
            "actorId": founder["id"],
            "action": "subscription.activated",
            "target": pro["id"],
            "metadata": {"amount": format_currency(pro["priceCents"])},
        })

        if is_feature_enabled("analytics"):
            logger.info("  • Tracking analytics events")
            track_event("dashboard_viewed", {"plan": pro["name"]}, founder["id"], db)
            track_event("chat_started", {"threadId": thread["id"]}, founder["id"], db)
            track_event("voice_preview_played", {"sessionId": create_id("evt")}, founder["id"], db)

        if is_feature_enabled("voice"):
            logger.info("  • Creating sample voice session")
            transcribe_audio(b"Voice session summary for the AI boilerplate.", db)

        if is_feature_enabled("emails"):
            logger.info("  • Sending welcome email preview")
            send_transactional_email(
                founder["email"],
                "welcome-email",
                {"plan": pro["name"], "price": format_currency(pro["priceCents"])},
                db,
            )

    logger.info("Demo data ready for %s", settings.DEFAULT_USER_EMAIL)
    return {"user": founder, "product": pro, "thread": thread}


def main() -> int:
    logging.basicConfig(level=get_settings().LOG_LEVEL, format="%(message)s")
    logger.info("Seeding demo data...")
    try:
        seed()
    except Exception:
        logger.exception("Failed to seed demo data")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
