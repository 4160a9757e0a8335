"""Mediator personality settings schemas."""
from pydantic import BaseModel, Field
from typing import Literal, Optional

Tone = Literal["warm", "professional", "direct", "gentle"]
Formality = Literal["casual", "balanced", "formal"]
ResponseLength = Literal["concise", "moderate", "detailed"]


class MediatorSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    tone: Optional[Tone] = None
    formality: Optional[Formality] = None
    response_length: Optional[ResponseLength] = None
    use_emoji: Optional[bool] = None
    use_metaphors: Optional[bool] = None
    cultural_context: Optional[str] = Field(None, max_length=1000)


class MediatorSettingsResponse(BaseModel):
    tone: str
    formality: str
    response_length: str
    use_emoji: bool
    use_metaphors: bool
    cultural_context: Optional[str] = None
