"""Invite and join schemas."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class InviteResponse(BaseModel):
    code: str
    url: str
    expires_at: datetime


class InviteStatusResponse(BaseModel):
    has_invite: bool
    is_expired: bool = False
    code: Optional[str] = None
    url: Optional[str] = None
    expires_at: Optional[datetime] = None


class JoinRequest(BaseModel):
    """Schema for redeeming an invite code."""
    invite_code: str = Field(..., min_length=1, max_length=16)
    display_name: Optional[str] = Field(None, max_length=255)


class JoinResponse(BaseModel):
    success: bool
    session_id: str
    already_joined: bool = False


class InvitePreviewResponse(BaseModel):
    """What a user sees about a session before joining it."""
    session_id: str
    topic: str
    initiator_name: str
    status: str
    created_at: datetime
