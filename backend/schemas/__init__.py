"""Pydantic schemas for API request/response."""

from .requests import (
    ChatMessage,
    CheckoutRequest,
    DocumentUpsert,
    EventTrack,
    ProductUpsert,
    SignIn,
    SpeechRequest,
    ThreadCreate,
)

__all__ = [
    "ChatMessage",
    "CheckoutRequest",
    "DocumentUpsert",
    "EventTrack",
    "ProductUpsert",
    "SignIn",
    "SpeechRequest",
    "ThreadCreate",
]
