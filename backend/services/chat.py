"""Chat threads and messages on top of the store."""

import logging
from typing import Optional

from repositories import Collection, DocumentStore, NotFoundError
from store import get_database

from .errors import require_feature
from .llm import create_chat_completion

logger = logging.getLogger(__name__)


def get_thread(thread_id: str, db: Optional[DocumentStore] = None) -> dict:
    db = db or get_database()
    thread = db.find(Collection.THREADS, thread_id)
    if thread is None:
        raise NotFoundError(Collection.THREADS.value, thread_id)
    return thread


def create_thread(title: str, owner_id: Optional[str] = None, db: Optional[DocumentStore] = None) -> dict:
    """Get-or-create by title (threads are keyed by title). An owner is only written when given."""
    require_feature("chat")
    db = db or get_database()
    candidate = {"title": title}
    if owner_id:
        candidate["ownerId"] = owner_id
    return db.upsert_thread(candidate)


def get_recent_messages(thread_id: str, limit: int = 20, db: Optional[DocumentStore] = None) -> list[dict]:
    db = db or get_database()
    messages = db.get_messages(thread_id)
    return messages[max(0, len(messages) - limit):]


def send_chat_message(thread_id: str, content: str, db: Optional[DocumentStore] = None) -> dict:
    """Store the user message, generate a reply from the whole thread, store the reply."""
    require_feature("chat")
    db = db or get_database()
    get_thread(thread_id, db)

    user_message = db.add_message({"threadId": thread_id, "role": "user", "content": content})
    conversation = db.get_messages(thread_id)
    completion = create_chat_completion(
        [{"role": m["role"], "content": m["content"]} for m in conversation]
    )
    assistant_message = db.add_message({
        "threadId": thread_id,
        "role": completion.role,
        "content": completion.content,
    })
    logger.info("Thread %s: reply of %d tokens", thread_id, completion.tokens_used)
    return {
        "userMessage": user_message,
        "assistantMessage": assistant_message,
        "tokensUsed": completion.tokens_used,
        "responseTimeMs": completion.response_time_ms,
    }
