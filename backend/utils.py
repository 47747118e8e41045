"""Small shared helpers: ids, money, text, timestamps."""

import re
import secrets
from datetime import datetime, timezone
from typing import Iterable

ID_PREFIXES = ("usr", "org", "prd", "sub", "msg", "thr", "evt", "doc")

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


def create_id(prefix: str = "evt") -> str:
    """Return a fresh id like ``usr_3f9a0c1b2d4e``."""
    if prefix not in ID_PREFIXES:
        raise ValueError(f"Unknown id prefix: {prefix}")
    return f"{prefix}_{secrets.token_hex(6)}"


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def format_currency(amount_cents: int, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    sign = "-" if amount_cents < 0 else ""
    return f"{sign}{symbol}{abs(amount_cents) / 100:,.2f}"


def chunk_text(source: str, max_length: int = 500) -> list[str]:
    """Greedily pack sentences into chunks no longer than max_length (a single long sentence stays whole)."""
    if not source.strip():
        return []
    parts: list[str] = []
    buffer = ""
    for sentence in _SENTENCE_SPLIT.split(source):
        if len(buffer + sentence) > max_length:
            if buffer:
                parts.append(buffer.strip())
            buffer = sentence
        else:
            buffer = f"{buffer} {sentence}".strip()
    if buffer:
        parts.append(buffer.strip())
    return parts


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)
