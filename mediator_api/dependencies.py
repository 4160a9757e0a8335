"""FastAPI dependencies shared by the routers."""
from fastapi import Depends, Request
from sqlmodel import Session

from mediator_api.db.config import get_session
from mediator_api.mediation.client import MediationClient
from mediator_api.realtime.broadcaster import SessionBroadcaster
from mediator_api.services.conversation_engine import ConversationEngine
from mediator_api.services.invite_service import InviteService
from mediator_api.services.mediator_settings_service import MediatorSettingsService
from mediator_api.services.message_service import MessageService
from mediator_api.services.participant_service import ParticipantService
from mediator_api.services.partnership_service import PartnershipService
from mediator_api.services.session_service import SessionService


def get_mediation_client(request: Request) -> MediationClient:
    """Mediator created in the application lifespan."""
    return request.app.state.mediation_client


def get_broadcaster(request: Request) -> SessionBroadcaster:
    """Broadcaster created in the application lifespan."""
    return request.app.state.broadcaster


def get_session_service(db: Session = Depends(get_session)) -> SessionService:
    return SessionService(db)


def get_participant_service(db: Session = Depends(get_session)) -> ParticipantService:
    return ParticipantService(db)


def get_message_service(db: Session = Depends(get_session)) -> MessageService:
    return MessageService(db)


def get_invite_service(db: Session = Depends(get_session)) -> InviteService:
    return InviteService(db)


def get_partnership_service(db: Session = Depends(get_session)) -> PartnershipService:
    return PartnershipService(db)


def get_settings_service(db: Session = Depends(get_session)) -> MediatorSettingsService:
    return MediatorSettingsService(db)


def get_conversation_engine(
    db: Session = Depends(get_session),
    mediator: MediationClient = Depends(get_mediation_client),
) -> ConversationEngine:
    return ConversationEngine(db, mediator)
