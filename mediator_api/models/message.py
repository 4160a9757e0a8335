"""
Session Message Model

One turn of a mediation conversation, tagged with the stage the session was in
when it was produced. Messages are immutable once created.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlmodel import Field, Relationship, SQLModel

from mediator_api.utils.clock import utc_now

if TYPE_CHECKING:
    from .session import MediationSession


class MessageRole(str, Enum):
    """Message author role"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class SessionMessage(SQLModel, table=True):
    """
    Individual message in a mediation session.

    user_id is null for mediator-authored (assistant/system) messages.
    Ordering is (created_at, id); id is assigned in insertion order so turns
    written in the same transaction keep their relative order.
    """
    __tablename__ = "session_messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(
        sa_column=Column(String, ForeignKey("mediation_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    user_id: Optional[str] = Field(default=None, max_length=255)
    role: str = Field(sa_column=Column(String(20), nullable=False))  # MessageRole value
    content: str = Field(sa_column=Column(Text, nullable=False))
    stage: str = Field(max_length=40)  # SessionStage value at time of writing
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime())

    session: "MediationSession" = Relationship(
        back_populates="messages",
        sa_relationship_kwargs={"lazy": "select"},
    )
