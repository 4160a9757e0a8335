"""Mediator personality settings API Router."""
from fastapi import APIRouter, Depends

from mediator_api.dependencies import get_settings_service
from mediator_api.middleware.auth import get_current_user, CurrentUser
from mediator_api.schemas.mediator_settings import MediatorSettingsResponse, MediatorSettingsUpdate
from mediator_api.services.mediator_settings_service import MediatorSettingsService

router = APIRouter(tags=["Settings"])  # No prefix since main.py adds /api prefix


@router.get("/settings/mediator", response_model=MediatorSettingsResponse)
async def get_mediator_settings(
    current_user: CurrentUser = Depends(get_current_user),
    service: MediatorSettingsService = Depends(get_settings_service),
):
    """The caller's mediator personality, or the defaults when none is stored."""
    return service.get_personality(current_user.user_id).to_dict()


@router.put("/settings/mediator", response_model=MediatorSettingsResponse)
async def update_mediator_settings(
    data: MediatorSettingsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MediatorSettingsService = Depends(get_settings_service),
):
    personality = service.update(current_user.user_id, data.model_dump(exclude_unset=True))
    return personality.to_dict()


@router.delete("/settings/mediator", response_model=MediatorSettingsResponse)
async def reset_mediator_settings(
    current_user: CurrentUser = Depends(get_current_user),
    service: MediatorSettingsService = Depends(get_settings_service),
):
    return service.reset(current_user.user_id).to_dict()
