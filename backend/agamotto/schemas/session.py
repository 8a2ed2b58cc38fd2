# agamotto/schemas/session.py
from pydantic import BaseModel, Field
from typing import Optional, List
from ..models.session import SessionState
from .tag import TagResponse

# Request schemas
class SessionUpdate(BaseModel):
    """Schema for saving a session (create or replace by id)"""
    title: str = ""
    duration: int = Field(0, ge=0)
    rating: float = Field(0, ge=0, le=5)
    comment: str = ""
    timestamp: int
    state: SessionState = SessionState.NOT_STARTED
    tag: Optional[TagResponse] = None

# Response schemas
class SessionResponse(BaseModel):
    """Schema for session response"""
    id: str
    title: str
    duration: int
    rating: float
    comment: str
    timestamp: int
    state: SessionState
    tag: Optional[TagResponse] = None
    
    class Config:
        from_attributes = True

class SessionListResponse(BaseModel):
    """Schema for list of sessions"""
    sessions: List[SessionResponse]
    total: int
