"""Request body models for Ledger API."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class SignIn(BaseModel):
    email: str
    password: str


class ThreadCreate(BaseModel):
    title: str = Field(min_length=1)
    owner_id: Optional[str] = None


class ChatMessage(BaseModel):
    thread_id: str
    message: str = Field(min_length=1)


class CheckoutRequest(BaseModel):
    product_id: str


class ProductUpsert(BaseModel):
    """Fields left out of the request are left untouched on an existing product."""
    name: str
    description: Optional[str] = None
    price_cents: Optional[int] = Field(default=None, ge=0)
    interval: Optional[Literal["month", "year"]] = None


class DocumentUpsert(BaseModel):
    slug: str = Field(min_length=1)
    title: str
    body: str


class EventTrack(BaseModel):
    name: str
    payload: dict[str, Any] = Field(default_factory=dict)
    user_id: Optional[str] = None


class SpeechRequest(BaseModel):
    text: str = Field(min_length=1)
