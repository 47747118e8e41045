"""API route modules."""

from .health import router as health_router
from .auth import router as auth_router
from .chat import router as chat_router
from .billing import router as billing_router
from .knowledge import router as knowledge_router
from .voice import router as voice_router
from .dashboard import router as dashboard_router

__all__ = [
    "health_router",
    "auth_router",
    "chat_router",
    "billing_router",
    "knowledge_router",
    "voice_router",
    "dashboard_router",
]
