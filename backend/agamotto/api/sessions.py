# agamotto/api/sessions.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from ..models.session import SessionState
from ..schemas.session import SessionUpdate, SessionResponse, SessionListResponse
from ..services.errors import ActiveSessionConflictError, StoreWriteError
from ..services.record_store import RecordStore
from ..services.records import SessionRecord, TagRecord
from ..services.session_service import save_session
from .dependencies import get_store

router = APIRouter()

@router.get("/", response_model=SessionListResponse)
async def list_sessions(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    state: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store)
):
    """
    List sessions ordered by start time, newest first
    Optional filter by state
    """
    if state:
        try:
            state_enum = SessionState(state)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid state: {state}")
        sessions = await store.get_sessions_by_state(state_enum)
    else:
        sessions = await store.get_all_sessions()
    
    sessions.sort(key=lambda s: s.timestamp, reverse=True)
    
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions[skip:skip + limit]],
        total=len(sessions)
    )

@router.get("/active", response_model=Optional[SessionResponse])
async def get_active_session(store: RecordStore = Depends(get_store)):
    """
    Get the currently active or paused session (null when none)
    """
    return await store.get_active_session()

@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    store: RecordStore = Depends(get_store)
):
    """
    Get a specific session by ID
    """
    session = await store.get_session(session_id)
    
    if not session:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    
    return session

@router.put("/{session_id}",
            response_model=SessionResponse,
            summary="Save Session",
            description="""
            Create or replace a session.
            
            **Rules**:
            - Only one session may be `active` or `paused` at a time (409 otherwise)
            - Moving a tagged session into `completed` bumps the tag's usage counters
            - The tag is stored as a snapshot; later tag changes do not alter it
            """)
async def put_session(
    session_id: str,
    payload: SessionUpdate,
    store: RecordStore = Depends(get_store)
):
    """Save a session"""
    session = SessionRecord(
        id=session_id,
        title=payload.title,
        duration=payload.duration,
        rating=payload.rating,
        comment=payload.comment,
        timestamp=payload.timestamp,
        state=payload.state,
        tag=TagRecord(**payload.tag.model_dump()) if payload.tag else None,
    )
    
    try:
        return await save_session(store, session)
    except ActiveSessionConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=400, detail=str(e))
