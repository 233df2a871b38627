"""HTTP API for the weather dashboard."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from .dashboard import DashboardOrchestrator, DashboardState
from .location import DeniedLocationProvider, LocationProvider, StaticLocationProvider
from .session_manager import create_session, get_session
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()


class SessionResponse(DashboardState):
    """Dashboard snapshot tagged with the session it belongs to."""
    session_id: str


class SearchRequest(BaseModel):
    """Free-text place search."""
    query: str


class LocationRequest(BaseModel):
    """Browser geolocation result: coordinates, or the error it reported."""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    error: Optional[str] = None


class FavoriteRequest(BaseModel):
    """Optional custom label for the place being saved."""
    label: Optional[str] = None


def _require_session(session_id: str) -> DashboardOrchestrator:
    """Return the session's orchestrator or raise a 404."""
    orchestrator = get_session(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail="Unknown session ID")
    return orchestrator


def _respond(session_id: str, orchestrator: DashboardOrchestrator) -> SessionResponse:
    return SessionResponse(session_id=session_id, **orchestrator.snapshot().model_dump())


GEOLOCATION_UNSUPPORTED = "unsupported"


def _location_provider(req: LocationRequest) -> Optional[LocationProvider]:
    """None when the browser has no geolocation API at all."""
    if req.error == GEOLOCATION_UNSUPPORTED:
        return None
    if req.error or req.latitude is None or req.longitude is None:
        return DeniedLocationProvider(reason=req.error)
    return StaticLocationProvider(latitude=req.latitude, longitude=req.longitude)


@router.post("/session/start", response_model=SessionResponse)
async def start_session():
    """Create a dashboard and show the last-seen (or default) place."""
    session_id, orchestrator = create_session()
    await orchestrator.restore()
    return _respond(session_id, orchestrator)


@router.get("/session/{session_id}", response_model=SessionResponse)
async def get_state(session_id: str):
    """Return the current dashboard state without touching providers."""
    return _respond(session_id, _require_session(session_id))


@router.post("/session/{session_id}/search", response_model=SessionResponse)
async def search(session_id: str, req: SearchRequest):
    """Geocode a query and load the first match."""
    orchestrator = _require_session(session_id)
    await orchestrator.search(req.query)
    return _respond(session_id, orchestrator)


@router.post("/session/{session_id}/location", response_model=SessionResponse)
async def use_location(session_id: str, req: LocationRequest):
    """Load the position the browser's geolocation API reported."""
    orchestrator = _require_session(session_id)
    await orchestrator.use_device_location(_location_provider(req))
    return _respond(session_id, orchestrator)


@router.post("/session/{session_id}/units/toggle", response_model=SessionResponse)
async def toggle_units(session_id: str):
    """Switch metric/imperial and re-render the cached forecast."""
    orchestrator = _require_session(session_id)
    orchestrator.toggle_units()
    return _respond(session_id, orchestrator)


@router.post("/session/{session_id}/favorites", response_model=SessionResponse)
async def save_favorite(session_id: str, req: FavoriteRequest):
    """Save the current place to favorites."""
    orchestrator = _require_session(session_id)
    orchestrator.save_favorite(req.label)
    return _respond(session_id, orchestrator)


@router.post("/session/{session_id}/favorites/{index}/load", response_model=SessionResponse)
async def load_favorite(session_id: str, index: int):
    """Load a saved place."""
    orchestrator = _require_session(session_id)
    try:
        await orchestrator.load_favorite(index)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"No favorite at index {index}")
    return _respond(session_id, orchestrator)


@router.delete("/session/{session_id}/favorites/{index}", response_model=SessionResponse)
async def remove_favorite(session_id: str, index: int):
    """Remove a saved place."""
    orchestrator = _require_session(session_id)
    try:
        orchestrator.remove_favorite(index)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"No favorite at index {index}")
    return _respond(session_id, orchestrator)
