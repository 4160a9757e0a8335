"""Session, message and participant schemas for the mediation API."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional, List


class SessionCreate(BaseModel):
    """Schema for starting a mediation session."""
    partnership_id: Optional[str] = None  # Null for solo sessions
    topic: Optional[str] = Field(None, min_length=1, max_length=500)
    display_name: Optional[str] = Field(None, max_length=255)


class SessionStatusUpdate(BaseModel):
    status: Literal["active", "paused", "completed", "abandoned"]


class SessionResponse(BaseModel):
    """Schema for session API responses."""
    id: str
    partnership_id: Optional[str] = None
    initiator_id: str
    topic: str
    stage: str
    status: str
    session_mode: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    """Schema for posting a message to a session."""
    content: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    id: int
    session_id: str
    user_id: Optional[str] = None
    role: str
    content: str
    stage: str
    created_at: datetime

    class Config:
        from_attributes = True


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]
    count: int


class SafetyAlertResponse(BaseModel):
    type: str  # crisis, abuse or escalation
    message: str

    class Config:
        from_attributes = True


class TurnResponse(BaseModel):
    """One recorded exchange: the user's message and the mediator's reply."""
    user_message: MessageResponse
    assistant_message: MessageResponse
    stage: str
    next_stage: Optional[str] = None  # Set only when the stage advanced
    safety_alert: Optional[SafetyAlertResponse] = None


class ParticipantResponse(BaseModel):
    user_id: str
    slot: int
    role: str
    display_name: Optional[str] = None
    joined_at: datetime
    last_seen_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ParticipantListResponse(BaseModel):
    participants: List[ParticipantResponse]
    count: int


class SessionCreateResponse(BaseModel):
    session: SessionResponse
    welcome_message: MessageResponse


class SessionDetailResponse(BaseModel):
    session: SessionResponse
    participants: List[ParticipantResponse]
    is_initiator: bool
    recent_messages: List[MessageResponse]  # newest first


class SessionListResponse(BaseModel):
    sessions: List[SessionResponse]
    count: int


class SessionStatsResponse(BaseModel):
    active: int
    paused: int
    completed: int
    total: int


class TypingUpdate(BaseModel):
    is_typing: bool
