"""
Email/password auth over the users collection.
Sessions live in process memory only; a restart signs everyone out.
"""

import hashlib
import hmac
import logging
import secrets
import threading
from dataclasses import dataclass
from typing import Optional

from config import get_settings
from repositories import Collection, DocumentStore
from store import get_database
from utils import create_id, utc_now_iso

from .errors import AuthError, require_feature

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "demo1234"
DEMO_AVATAR_URL = "https://www.gravatar.com/avatar?d=identicon"


@dataclass
class Session:
    id: str
    user_id: str
    token: str
    created_at: str


_sessions: dict[str, Session] = {}
_sessions_lock = threading.Lock()


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Return ``salt:hash`` (hex) using scrypt with N=16384, r=8, p=1."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.scrypt(
        password.encode("utf-8"), salt=salt.encode("utf-8"), n=16384, r=8, p=1, dklen=32
    )
    return f"{salt}:{digest.hex()}"


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored or ":" not in stored:
        return False
    salt, expected = stored.split(":", 1)
    _, candidate = hash_password(password, salt).split(":", 1)
    return hmac.compare_digest(expected, candidate)


def ensure_demo_user(db: Optional[DocumentStore] = None) -> dict:
    """Create the configured demo admin, or give an existing one a password."""
    db = db or get_database()
    email = get_settings().DEFAULT_USER_EMAIL
    existing = db.find_user_by_email(email)
    if existing is None:
        logger.info("Creating demo user %s", email)
        return db.upsert_user({
            "email": email,
            "name": "Demo Founder",
            "role": "admin",
            "avatarUrl": DEMO_AVATAR_URL,
            "passwordHash": hash_password(DEMO_PASSWORD),
        })
    if not existing.get("passwordHash"):
        return db.upsert_user({**existing, "passwordHash": hash_password(DEMO_PASSWORD)})
    return existing


def authenticate(email: str, password: str, db: Optional[DocumentStore] = None) -> tuple[dict, Session]:
    require_feature("auth")
    db = db or get_database()
    user = db.find_user_by_email(email)
    if not user or not verify_password(password, user.get("passwordHash")):
        logger.info("Failed sign-in for %s", email)
        raise AuthError()
    session = Session(
        id=create_id("evt"),
        user_id=user["id"],
        token=secrets.token_hex(24),
        created_at=utc_now_iso(),
    )
    with _sessions_lock:
        _sessions[session.token] = session
    return user, session


def get_session(token: Optional[str]) -> Optional[Session]:
    if not token:
        return None
    with _sessions_lock:
        return _sessions.get(token)


def sign_out(token: str) -> None:
    with _sessions_lock:
        _sessions.pop(token, None)


def get_current_user(token: Optional[str], db: Optional[DocumentStore] = None) -> Optional[dict]:
    session = get_session(token)
    if not session:
        return None
    db = db or get_database()
    return db.find(Collection.USERS, session.user_id)
