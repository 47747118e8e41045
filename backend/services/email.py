"""Transactional email mock: every send is written to the audit log."""

from typing import Optional

from repositories import DocumentStore
from store import get_database
from utils import create_id

from .errors import require_feature

CAMPAIGNS = (
    {"name": "Welcome Series", "subject": "Your AI workspace is ready", "delivered": 482, "opened": 401},
    {"name": "Feature Spotlight", "subject": "Voice-first customer support", "delivered": 311, "opened": 204},
)

_campaigns = [{"id": create_id("evt"), **c} for c in CAMPAIGNS]


def list_email_campaigns() -> list[dict]:
    return [dict(c) for c in _campaigns]


def send_transactional_email(
    to: str,
    template: str,
    variables: dict[str, str],
    db: Optional[DocumentStore] = None,
) -> dict:
    require_feature("emails")
    db = db or get_database()
    db.add_audit_log({
        "actorId": to,
        "action": "email.sent",
        "target": template,
        "metadata": dict(variables),
    })
    return {
        "id": create_id("evt"),
        "to": to,
        "template": template,
        "variables": dict(variables),
        "previewUrl": f"https://email.preview/{template}",
    }
