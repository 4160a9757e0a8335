"""Partnership schemas."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class PartnershipAccept(BaseModel):
    invite_code: str = Field(..., min_length=1, max_length=32)


class PartnershipResponse(BaseModel):
    id: str
    user1_id: str
    user2_id: Optional[str] = None
    invite_code: str
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PartnershipListResponse(BaseModel):
    partnerships: List[PartnershipResponse]
    count: int
