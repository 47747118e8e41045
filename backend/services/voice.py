"""
Mock voice features. Transcription records a VoiceSession with placeholder
text; synthesis returns a URL. No speech provider is called.
"""

import urllib.parse
from typing import Optional

from repositories import DocumentStore
from store import get_database
from utils import create_id, truncate

from .errors import require_feature


def list_voice_sessions(db: Optional[DocumentStore] = None) -> list[dict]:
    db = db or get_database()
    return sorted(db.get_voice_sessions(), key=lambda s: s.get("createdAt", ""), reverse=True)


def transcribe_audio(audio_bytes: bytes, db: Optional[DocumentStore] = None) -> dict:
    require_feature("voice")
    db = db or get_database()
    transcript = f"Transcribed {len(audio_bytes)} bytes of audio into text."
    return db.add_voice_session({
        "title": truncate(transcript, 48),
        "transcript": transcript,
        "durationSeconds": max(1, round(len(audio_bytes) / 80)),
    })


def synthesize_speech(text: str) -> dict:
    require_feature("voice")
    audio_id = create_id("evt")
    query = urllib.parse.quote(text[:80], safe="")
    return {"audioUrl": f"https://voice.example.com/generated/{audio_id}?text={query}"}
