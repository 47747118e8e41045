"""Voice sessions: upload audio for a (mock) transcript."""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from api.deps import StoreDep
from schemas.requests import SpeechRequest
from services.voice import list_voice_sessions, synthesize_speech, transcribe_audio

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/voice", tags=["voice"])

MAX_AUDIO_BYTES = 25 * 1024 * 1024  # 25 MB


@router.get("/sessions")
async def sessions(db: StoreDep):
    return JSONResponse({"sessions": list_voice_sessions(db)})


@router.post("/transcribe")
async def transcribe(db: StoreDep, file: UploadFile = File(...)):
    content = await file.read()
    if not content:
        raise HTTPException(400, "Empty audio file")
    if len(content) > MAX_AUDIO_BYTES:
        raise HTTPException(413, "Audio file too large (max 25 MB).")
    logger.info("Transcribing %s (%.1f KB)", file.filename, len(content) / 1024)
    return JSONResponse(transcribe_audio(content, db))


@router.post("/speak")
async def speak(body: SpeechRequest):
    return JSONResponse(synthesize_speech(body.text))
