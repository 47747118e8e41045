"""FastAPI dependencies and require-helpers for routes."""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from repositories import Collection, DocumentStore
from services.auth import get_current_user
from store import get_database


def get_store() -> DocumentStore:
    """Return the process-wide document store. Use in Depends(); tests override it."""
    return get_database()


StoreDep = Annotated[DocumentStore, Depends(get_store)]


def bearer_token(authorization: Annotated[Optional[str], Header()] = None) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    return token.strip() if scheme.lower() == "bearer" and token.strip() else None


def require_user(
    db: StoreDep,
    token: Annotated[Optional[str], Depends(bearer_token)],
) -> dict:
    """Resolve the signed-in user from the bearer token or raise 401."""
    user = get_current_user(token, db)
    if not user:
        raise HTTPException(401, "Not signed in")
    return user


def require_thread(thread_id: str, db: StoreDep) -> dict:
    """Load thread by id or raise 404. Use as Depends(require_thread) with thread_id in path."""
    thread = db.find(Collection.THREADS, thread_id)
    if not thread:
        raise HTTPException(404, f"Thread '{thread_id}' not found")
    return thread
