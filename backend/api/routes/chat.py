"""Chat threads and message turns."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.deps import StoreDep, require_thread
from schemas.requests import ChatMessage, ThreadCreate
from services.chat import create_thread, get_recent_messages, send_chat_message

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.get("/threads")
async def list_threads(db: StoreDep):
    return JSONResponse({"threads": db.get_threads()})


@router.post("/threads")
async def open_thread(body: ThreadCreate, db: StoreDep):
    thread = create_thread(body.title, body.owner_id, db)
    return JSONResponse(thread)


@router.get("/threads/{thread_id}")
async def get_thread(
    thread: Annotated[dict, Depends(require_thread)],
    db: StoreDep,
    limit: int = Query(50, ge=1, le=500),
):
    return JSONResponse({
        "thread": thread,
        "messages": get_recent_messages(thread["id"], limit, db),
    })


@router.post("")
async def chat(msg: ChatMessage, db: StoreDep):
    result = send_chat_message(msg.thread_id, msg.message, db)
    return JSONResponse(result)
