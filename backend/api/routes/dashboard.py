"""Dashboard snapshot and analytics events."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.deps import StoreDep
from schemas.requests import EventTrack
from services.analytics import list_analytics_events, track_event
from services.dashboard import get_dashboard_snapshot
from services.errors import require_feature

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard")
async def dashboard(db: StoreDep):
    return JSONResponse(get_dashboard_snapshot(db))


@router.get("/analytics/events")
async def events(db: StoreDep):
    return JSONResponse({"events": list_analytics_events(db=db)})


@router.post("/analytics/events")
async def track(body: EventTrack, db: StoreDep):
    require_feature("analytics")
    return JSONResponse(track_event(body.name, body.payload, body.user_id, db))
