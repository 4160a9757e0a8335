"""
Invites API Router

Invite codes let the initiator bring a partner into a session. Generating,
viewing and revoking are restricted to the initiator; any authenticated user
holding a valid code may preview and join.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from mediator_api.dependencies import get_broadcaster, get_invite_service
from mediator_api.errors import ForbiddenError, NotFoundError
from mediator_api.middleware.auth import get_current_user, CurrentUser
from mediator_api.models.session import MediationSession
from mediator_api.realtime.broadcaster import SessionBroadcaster
from mediator_api.schemas.invite import (
    InvitePreviewResponse,
    InviteResponse,
    InviteStatusResponse,
    JoinRequest,
    JoinResponse,
)
from mediator_api.services.invite_service import InviteService

router = APIRouter(tags=["Invites"])  # No prefix since main.py adds /api prefix


def normalize_code(code: str) -> str:
    return code.strip().upper()


def require_initiator(service: InviteService, session_id: str, user_id: str) -> MediationSession:
    session = service.participants.require_access(session_id, user_id)
    if session.initiator_id != user_id:
        raise ForbiddenError("Only the session initiator can manage invites")
    return session


@router.get("/sessions/join", response_model=InvitePreviewResponse)
async def preview_invite(
    code: str = Query(..., min_length=1, max_length=16, description="Invite code"),
    current_user: CurrentUser = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service),
):
    """Session summary for an invite code, shown before joining."""
    preview = service.preview_by_code(normalize_code(code))
    if not preview:
        raise NotFoundError("Invalid or expired invite code")
    return preview


@router.post("/sessions/join", response_model=JoinResponse)
async def join_session(
    data: JoinRequest,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service),
    broadcaster: SessionBroadcaster = Depends(get_broadcaster),
):
    display_name = data.display_name or current_user.name
    result = service.join_by_code(normalize_code(data.invite_code), current_user.user_id, display_name)

    if not result.already_joined:
        background_tasks.add_task(
            broadcaster.publish_user_joined, result.session_id, current_user.user_id, display_name
        )
    return result


@router.post(
    "/sessions/{session_id}/invite",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_invite(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service),
):
    """Issue a new invite code, replacing any previous one."""
    require_initiator(service, session_id, current_user.user_id)
    return service.generate_invite(session_id)


@router.get("/sessions/{session_id}/invite", response_model=InviteStatusResponse)
async def get_invite(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service),
):
    require_initiator(service, session_id, current_user.user_id)
    return service.get_invite_status(session_id)


@router.delete("/sessions/{session_id}/invite", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invite(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service),
):
    require_initiator(service, session_id, current_user.user_id)
    service.revoke_invite(session_id)
    return None
