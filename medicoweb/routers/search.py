from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from medicoweb.schemas.monograph import MONOGRAPH_RESPONSE_SCHEMA
from medicoweb.schemas.search import SearchRequest, SearchResponse
from medicoweb.services.presentation import build_view
from medicoweb.services.search_service import SearchOrchestrator, SearchSessionStore


router = APIRouter(prefix="/api", tags=["search"])


def get_search_sessions(request: Request) -> SearchSessionStore:
    return request.app.state.search_sessions


def _to_response(session_id: str, orchestrator: SearchOrchestrator) -> SearchResponse:
    state = orchestrator.state
    return SearchResponse(session_id=session_id, state=state, view=build_view(state))


@router.post("/search", response_model=SearchResponse)
async def search(
    payload: SearchRequest,
    sessions: SearchSessionStore = Depends(get_search_sessions),
):
    session_id, orchestrator = await sessions.get_or_create(payload.session_id)
    await orchestrator.search(payload.drug_name)
    return _to_response(session_id, orchestrator)


@router.get("/search/{session_id}", response_model=SearchResponse)
async def search_state(
    session_id: str,
    sessions: SearchSessionStore = Depends(get_search_sessions),
):
    orchestrator = await sessions.get(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown search session.")
    return _to_response(session_id, orchestrator)


@router.get("/schema")
def monograph_schema() -> dict:
    return MONOGRAPH_RESPONSE_SCHEMA
