"""
Synthetic chat completion. No model is called: the reply restates the last
user message as bullet points. Usage counters are process-local.
"""

import threading
import time
from dataclasses import dataclass, field

from utils import average, chunk_text


@dataclass
class ChatCompletion:
    content: str
    tokens_used: int
    response_time_ms: int
    role: str = "assistant"


@dataclass
class _Usage:
    tokens_used: int = 0
    response_times: list[float] = field(default_factory=list)
    total_sessions: int = 0


_usage = _Usage()
_usage_lock = threading.Lock()


def _synthesize_response(prompt: str) -> str:
    bullets = []
    for chunk in chunk_text(prompt, 120):
        suffix = "…" if len(chunk) > 110 else ""
        bullets.append(f"• {chunk[:110]}{suffix}")
    return "Here is what I understood:\n" + "\n".join(bullets) + "\n\nReady for the next step?"


def create_chat_completion(messages: list[dict]) -> ChatCompletion:
    start = time.monotonic()
    last_user = next((m for m in reversed(messages) if m.get("role") == "user"), None)
    prompt = (last_user or {}).get("content") or "Hello!"
    response = _synthesize_response(prompt)
    tokens_used = round(len(response) / 4)
    response_time_ms = 100 + len(prompt) * 2

    with _usage_lock:
        _usage.tokens_used += tokens_used
        _usage.response_times.append((time.monotonic() - start) * 1000 + response_time_ms)
        _usage.total_sessions += 1

    return ChatCompletion(content=response, tokens_used=tokens_used, response_time_ms=response_time_ms)


def get_usage_statistics() -> dict:
    with _usage_lock:
        return {
            "tokensUsed": _usage.tokens_used,
            "avgResponseTimeMs": round(average(_usage.response_times)),
            "totalSessions": _usage.total_sessions,
        }


def reset_usage() -> None:
    with _usage_lock:
        _usage.tokens_used = 0
        _usage.response_times = []
        _usage.total_sessions = 0
