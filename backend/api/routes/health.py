from datetime import datetime, timezone

from fastapi import APIRouter

from config import get_settings
from api.deps import StoreDep

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: StoreDep):
    settings = get_settings()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
        "storage": str(db.path),
    }
