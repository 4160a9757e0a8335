"""
Sessions API Router

Session lifecycle, the message log and presence for mediation sessions.

Every route under /sessions/{session_id} requires the caller to be the
session's initiator or its registered partner.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from mediator_api.dependencies import (
    get_broadcaster,
    get_conversation_engine,
    get_message_service,
    get_participant_service,
    get_session_service,
)
from mediator_api.errors import MediationError
from mediator_api.middleware.auth import get_current_user, CurrentUser
from mediator_api.realtime.broadcaster import SessionBroadcaster
from mediator_api.schemas.session import (
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    ParticipantListResponse,
    SessionCreate,
    SessionCreateResponse,
    SessionDetailResponse,
    SessionListResponse,
    SessionResponse,
    SessionStatsResponse,
    SessionStatusUpdate,
    TurnResponse,
    TypingUpdate,
)
from mediator_api.services.conversation_engine import ConversationEngine
from mediator_api.services.message_service import MessageService
from mediator_api.services.participant_service import ParticipantService
from mediator_api.services.session_service import SessionService

import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sessions"])  # No prefix since main.py adds /api prefix


def message_payload(message) -> dict:
    """JSON-ready message for real-time subscribers."""
    return MessageResponse.model_validate(message).model_dump(mode="json")


@router.post("/sessions", response_model=SessionCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: SessionCreate,
    current_user: CurrentUser = Depends(get_current_user),
    engine: ConversationEngine = Depends(get_conversation_engine),
):
    """Start a session in the intake stage with the mediator's welcome as first message."""
    try:
        session, welcome = await engine.start_session(
            current_user.user_id,
            topic=data.topic,
            partnership_id=data.partnership_id,
            display_name=data.display_name or current_user.name,
        )
    except (HTTPException, MediationError):
        raise
    except Exception as e:
        logger.error(f"Failed to create session for user {current_user.user_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create session",
        )

    return {"session": session, "welcome_message": welcome}


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Sessions the user started or joined, most recently active first."""
    sessions = service.get_user_sessions(current_user.user_id)
    return {"sessions": sessions, "count": len(sessions)}


@router.get("/sessions/stats", response_model=SessionStatsResponse)
async def session_stats(
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return service.get_session_counts(current_user.user_id)


@router.get("/sessions/{session_id}", response_model=SessionDetailResponse)
async def get_session_detail(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    participants: ParticipantService = Depends(get_participant_service),
    messages: MessageService = Depends(get_message_service),
):
    """Session with its members and the latest window of messages, newest first."""
    session = participants.require_access(session_id, current_user.user_id)
    return {
        "session": session,
        "participants": participants.get_participants(session_id),
        "is_initiator": session.initiator_id == current_user.user_id,
        "recent_messages": messages.recent(session_id),
    }


@router.patch("/sessions/{session_id}/status", response_model=SessionResponse)
async def update_session_status(
    session_id: str,
    data: SessionStatusUpdate,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
    broadcaster: SessionBroadcaster = Depends(get_broadcaster),
):
    """Pause, resume, complete or abandon a session."""
    service.participants.require_access(session_id, current_user.user_id)
    session = service.update_status(session_id, data.status)

    background_tasks.add_task(broadcaster.publish_session_updated, session.id, session.stage, session.status)
    return session


@router.get("/sessions/{session_id}/messages", response_model=MessageListResponse)
async def list_messages(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    participants: ParticipantService = Depends(get_participant_service),
    messages: MessageService = Depends(get_message_service),
):
    """Full conversation, oldest first."""
    participants.require_access(session_id, current_user.user_id)
    history = messages.list(session_id)
    return {"messages": history, "count": len(history)}


@router.post("/sessions/{session_id}/messages", response_model=TurnResponse, status_code=status.HTTP_201_CREATED)
async def post_message(
    session_id: str,
    data: MessageCreate,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser = Depends(get_current_user),
    engine: ConversationEngine = Depends(get_conversation_engine),
    broadcaster: SessionBroadcaster = Depends(get_broadcaster),
):
    """
    Record a message and the mediator's reply.

    Request flow:
    1. Authenticate user (JWT) and check session membership
    2. Ask the mediator for a reply and a proposed next stage
    3. Store both messages and any stage advance in one transaction
    4. Publish the new messages to the other participant after responding
    """
    engine.sessions.participants.require_access(session_id, current_user.user_id)

    logger.info(f"Message from user {current_user.user_id} in session {session_id}: {data.content[:50]}...")

    try:
        turn = await engine.record_turn(session_id, current_user.user_id, data.content)
    except (HTTPException, MediationError):
        raise
    except Exception as e:
        logger.error(f"Failed to record message in session {session_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record message",
        )

    background_tasks.add_task(broadcaster.publish_new_message, session_id, message_payload(turn.user_message))
    background_tasks.add_task(broadcaster.publish_new_message, session_id, message_payload(turn.assistant_message))
    if turn.next_stage:
        session = engine.sessions.require_session(session_id)
        background_tasks.add_task(broadcaster.publish_session_updated, session_id, session.stage, session.status)

    return {
        "user_message": turn.user_message,
        "assistant_message": turn.assistant_message,
        "stage": turn.stage,
        "next_stage": turn.next_stage,
        "safety_alert": turn.safety_alert,
    }


@router.get("/sessions/{session_id}/participants", response_model=ParticipantListResponse)
async def list_participants(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    participants: ParticipantService = Depends(get_participant_service),
):
    """Participants in join order. Also records the caller as present."""
    participants.require_access(session_id, current_user.user_id)
    participants.update_last_seen(session_id, current_user.user_id)
    members = participants.get_participants(session_id)
    return {"participants": members, "count": len(members)}


@router.post("/sessions/{session_id}/typing")
async def update_typing(
    session_id: str,
    data: TypingUpdate,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser = Depends(get_current_user),
    participants: ParticipantService = Depends(get_participant_service),
    broadcaster: SessionBroadcaster = Depends(get_broadcaster),
):
    participants.require_access(session_id, current_user.user_id)
    participant = participants.get_participant(session_id, current_user.user_id)
    user_name = participant.display_name if participant and participant.display_name else current_user.name

    background_tasks.add_task(
        broadcaster.publish_typing, session_id, current_user.user_id, user_name, data.is_typing
    )
    return {"success": True}
