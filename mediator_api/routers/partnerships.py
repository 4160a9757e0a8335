"""Partnerships API Router."""
from fastapi import APIRouter, Depends, status

from mediator_api.dependencies import get_partnership_service
from mediator_api.middleware.auth import get_current_user, CurrentUser
from mediator_api.schemas.partnership import (
    PartnershipAccept,
    PartnershipListResponse,
    PartnershipResponse,
)
from mediator_api.services.partnership_service import PartnershipService

router = APIRouter(tags=["Partnerships"])  # No prefix since main.py adds /api prefix


@router.post("/partnerships", response_model=PartnershipResponse, status_code=status.HTTP_201_CREATED)
async def create_partnership(
    current_user: CurrentUser = Depends(get_current_user),
    service: PartnershipService = Depends(get_partnership_service),
):
    """Create a pending partnership; share its invite code with the partner."""
    return service.create_partnership(current_user.user_id)


@router.get("/partnerships", response_model=PartnershipListResponse)
async def list_partnerships(
    current_user: CurrentUser = Depends(get_current_user),
    service: PartnershipService = Depends(get_partnership_service),
):
    partnerships = service.get_user_partnerships(current_user.user_id)
    return {"partnerships": partnerships, "count": len(partnerships)}


@router.post("/partnerships/accept", response_model=PartnershipResponse)
async def accept_partnership(
    data: PartnershipAccept,
    current_user: CurrentUser = Depends(get_current_user),
    service: PartnershipService = Depends(get_partnership_service),
):
    return service.accept_invite(data.invite_code.strip(), current_user.user_id)


@router.delete("/partnerships/{partnership_id}", response_model=PartnershipResponse)
async def end_partnership(
    partnership_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PartnershipService = Depends(get_partnership_service),
):
    """End a partnership. Its sessions are kept."""
    return service.end_partnership(partnership_id, current_user.user_id)
