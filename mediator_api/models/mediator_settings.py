"""Per-user mediator personality settings."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel

from mediator_api.utils.clock import utc_now


class MediatorTone(str, Enum):
    WARM = "warm"
    PROFESSIONAL = "professional"
    DIRECT = "direct"
    GENTLE = "gentle"


class MediatorFormality(str, Enum):
    CASUAL = "casual"
    BALANCED = "balanced"
    FORMAL = "formal"


class MediatorResponseLength(str, Enum):
    CONCISE = "concise"
    MODERATE = "moderate"
    DETAILED = "detailed"


class MediatorSettings(SQLModel, table=True):
    """Stored personality preferences; absent row means defaults."""
    __tablename__ = "mediator_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(unique=True, index=True, max_length=255)
    tone: str = Field(default=MediatorTone.WARM.value, max_length=20)
    formality: str = Field(default=MediatorFormality.BALANCED.value, max_length=20)
    response_length: str = Field(default=MediatorResponseLength.MODERATE.value, max_length=20)
    use_emoji: bool = Field(default=False)
    use_metaphors: bool = Field(default=True)
    cultural_context: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
