"""Partnership model for SQLModel."""
import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

from mediator_api.utils.clock import utc_now

if TYPE_CHECKING:
    from .session import MediationSession


class PartnershipStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    ENDED = "ended"


class Partnership(SQLModel, table=True):
    """Standing relationship between two users, independent of any single session."""
    __tablename__ = "partnerships"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user1_id: str = Field(index=True, max_length=255)
    user2_id: Optional[str] = Field(default=None, index=True, max_length=255)
    invite_code: str = Field(unique=True, index=True, max_length=32)
    status: str = Field(default=PartnershipStatus.PENDING.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    sessions: List["MediationSession"] = Relationship(back_populates="partnership")

    def has_member(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)
