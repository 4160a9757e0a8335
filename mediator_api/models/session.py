"""
Mediation Session Model

A guided conversation between an initiator and an optional invited partner.
The session is the root entity: participants and messages are owned by it and
removed with it.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlmodel import Field, Relationship, SQLModel

from mediator_api.utils.clock import utc_now

if TYPE_CHECKING:
    from .message import SessionMessage
    from .participant import SessionParticipant
    from .partnership import Partnership


class SessionStage(str, Enum):
    """Conversation protocol phases, in protocol order."""
    INTAKE = "intake"
    PERSON_A_OBSERVATION = "person_a_observation"
    PERSON_A_FEELING = "person_a_feeling"
    PERSON_A_NEED = "person_a_need"
    PERSON_A_REQUEST = "person_a_request"
    REFLECTION_A = "reflection_a"
    PERSON_B_OBSERVATION = "person_b_observation"
    PERSON_B_FEELING = "person_b_feeling"
    PERSON_B_NEED = "person_b_need"
    PERSON_B_REQUEST = "person_b_request"
    REFLECTION_B = "reflection_b"
    COMMON_GROUND = "common_ground"
    AGREEMENT = "agreement"
    COMPLETE = "complete"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class SessionMode(str, Enum):
    SOLO = "solo"
    COLLABORATIVE = "collaborative"


class MediationSession(SQLModel, table=True):
    """
    Mediation session record.

    Relationships:
    - Optionally belongs to one Partnership (null for solo sessions)
    - Has many SessionParticipants (initiator in slot 1, partner in slot 2)
    - Has many SessionMessages (append-only)

    The invite is not a separate entity: a session carries at most one live
    invite code and its expiry.
    """
    __tablename__ = "mediation_sessions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    partnership_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("partnerships.id", ondelete="CASCADE"), index=True, nullable=True),
    )
    initiator_id: str = Field(index=True, max_length=255)
    topic: str = Field(sa_column=Column(Text, nullable=False))
    stage: str = Field(default=SessionStage.INTAKE.value, max_length=40)  # SessionStage value
    status: str = Field(default=SessionStatus.ACTIVE.value, max_length=20, index=True)  # SessionStatus value
    session_mode: str = Field(default=SessionMode.SOLO.value, max_length=20)
    invite_code: Optional[str] = Field(default=None, unique=True, index=True, max_length=16)
    invite_expires_at: Optional[datetime] = Field(default=None, sa_type=DateTime())
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime())

    partnership: Optional["Partnership"] = Relationship(back_populates="sessions")
    participants: List["SessionParticipant"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "lazy": "select"},
    )
    messages: List["SessionMessage"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "lazy": "select"},
    )
