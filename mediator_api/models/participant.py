"""Session participant model."""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from mediator_api.utils.clock import utc_now

if TYPE_CHECKING:
    from .session import MediationSession

INITIATOR_SLOT = 1
PARTNER_SLOT = 2
MAX_PARTICIPANTS = 2


class ParticipantRole(str, Enum):
    INITIATOR = "initiator"
    PARTNER = "partner"


class SessionParticipant(SQLModel, table=True):
    """A user registered as a member of a session.

    Capacity is enforced by the table itself: a session has one row per slot,
    slots are 1 (initiator) and 2 (partner), and a user appears at most once.
    """
    __tablename__ = "session_participants"
    __table_args__ = (
        UniqueConstraint("session_id", "slot", name="uq_session_participant_slot"),
        UniqueConstraint("session_id", "user_id", name="uq_session_participant_user"),
        CheckConstraint("slot IN (1, 2)", name="ck_session_participant_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(
        sa_column=Column(String, ForeignKey("mediation_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    user_id: str = Field(max_length=255, index=True)
    slot: int = Field(default=INITIATOR_SLOT)
    role: str = Field(default=ParticipantRole.INITIATOR.value, max_length=20)
    display_name: Optional[str] = Field(default=None, max_length=255)
    joined_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    last_seen_at: Optional[datetime] = Field(default=None, sa_type=DateTime())

    session: "MediationSession" = Relationship(back_populates="participants")
