"""Endpoints that drive a trip-building wizard session step by step."""

import json
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from app.schemas.accommodation import AccommodationSearchResult
from app.schemas.travel import SelectedAddOn, SelectedFlight, TravelContextPatch
from app.services.planner_session import PlannerSession, planner_sessions

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatRequest(BaseModel):
    message: str


class DestinationSelectRequest(BaseModel):
    destination: str


class BudgetRequest(BaseModel):
    budget: str | float


class AccommodationSelectRequest(BaseModel):
    accommodation_id: str


class AddOnsRequest(BaseModel):
    add_ons: list[SelectedAddOn]


def _get_session(session_id: str) -> PlannerSession:
    session = planner_sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Planner session not found")
    return session


@router.post("/sessions", status_code=201)
async def create_session():
    """Start a new wizard session at the destination step."""
    session = planner_sessions.create()
    await session.start()
    return session.snapshot()


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    return _get_session(session_id).snapshot()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str):
    _get_session(session_id)
    planner_sessions.discard(session_id)


@router.post("/sessions/{session_id}/chat")
async def chat(session_id: str, req: ChatRequest):
    """Send a chat message; searches or elaborates depending on the message."""
    session = _get_session(session_id)
    reply = await session.chat(req.message)
    if reply is None:
        raise HTTPException(status_code=400, detail="Message must not be empty")

    result = session.router.last_result
    return {
        "reply": reply,
        "search_result": result.model_dump(mode="json", by_alias=True) if result else None,
        "session": session.snapshot(),
    }


@router.post("/sessions/{session_id}/refresh")
async def refresh(session_id: str):
    """Re-run the last destination search."""
    session = _get_session(session_id)
    result = await session.router.refresh()
    if result is None:
        raise HTTPException(status_code=400, detail="No search to refresh")
    return result.model_dump(mode="json", by_alias=True)


@router.patch("/sessions/{session_id}/context")
async def update_context(session_id: str, patch: TravelContextPatch):
    session = _get_session(session_id)
    try:
        session.on_update(patch)
    except ValueError as e:
        # pydantic.ValidationError, e.g. a partial selection with nothing to merge onto
        raise HTTPException(status_code=400, detail=str(e))
    return session.snapshot()


@router.post("/sessions/{session_id}/destination")
async def select_destination(session_id: str, req: DestinationSelectRequest):
    session = _get_session(session_id)
    try:
        guide = await session.select_destination(req.destination)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"guide": guide, "session": session.snapshot()}


@router.post("/sessions/{session_id}/budget")
async def set_budget(session_id: str, req: BudgetRequest):
    session = _get_session(session_id)
    try:
        guide = await session.set_budget(req.budget)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"guide": guide, "session": session.snapshot()}


@router.post("/sessions/{session_id}/complete")
async def complete_step(session_id: str):
    """Finish the current step. ``advanced`` is false when the step is blocked."""
    session = _get_session(session_id)
    advanced = session.on_complete()
    return {"advanced": advanced, "session": session.snapshot()}


@router.get("/sessions/{session_id}/accommodations", response_model=AccommodationSearchResult)
async def find_accommodations(session_id: str):
    session = _get_session(session_id)
    try:
        return await session.find_accommodations()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/sessions/{session_id}/accommodations/select")
async def select_accommodation(session_id: str, req: AccommodationSelectRequest):
    session = _get_session(session_id)
    try:
        guide = await session.select_accommodation(req.accommodation_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"guide": guide, "session": session.snapshot()}


@router.post("/sessions/{session_id}/flight")
async def select_flight(session_id: str, flight: SelectedFlight):
    session = _get_session(session_id)
    session.select_flight(flight)
    return session.snapshot()


@router.post("/sessions/{session_id}/add-ons")
async def select_add_ons(session_id: str, req: AddOnsRequest):
    session = _get_session(session_id)
    session.select_add_ons(req.add_ons)
    return session.snapshot()


@router.get("/sessions/{session_id}/guide/stream")
async def stream_guide(session_id: str):
    """Stream the current guidance text as typed-reveal frames (server-sent events)."""
    session = _get_session(session_id)
    reveal = session.guide.reveal(session.guide_text)

    async def _events():
        async for frame in reveal:
            yield f"data: {json.dumps({'text': frame})}\n\n"
        yield "event: done\ndata: {}\n\n"

    return StreamingResponse(_events(), media_type="text/event-stream")
