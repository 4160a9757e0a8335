"""
Conversation Engine

Drives a mediation session turn by turn:
1. Load the session and its history
2. Ask the mediator for a reply and a proposed next stage
3. In one transaction: store the user message, advance the stage when the
   proposal is a legal move, store the mediator reply tagged with the
   resulting stage
4. Hand the safety alert (if any) back to the caller untouched

The mediator is called before anything is written, so a mediator failure
leaves the session exactly as it was.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlmodel import Session

from mediator_api.errors import InvalidInputError, MediationServiceError
from mediator_api.mediation.client import MediationClient, SafetyAlert
from mediator_api.models.message import MessageRole, SessionMessage
from mediator_api.models.session import MediationSession, SessionMode, SessionStage
from mediator_api.services.mediator_settings_service import MediatorSettingsService
from mediator_api.services.message_service import MessageService
from mediator_api.services.session_service import SessionService
from mediator_api.services.stage_machine import can_advance
from mediator_api.utils.logger import audit_logger
from mediator_api.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "New Session"


@dataclass
class TurnResult:
    user_message: SessionMessage
    assistant_message: SessionMessage
    stage: str
    next_stage: Optional[str] = None
    safety_alert: Optional[SafetyAlert] = None


class ConversationEngine:
    """Coordinates the session store, message log and mediator for one request."""

    def __init__(self, db: Session, mediator: MediationClient):
        self.db = db
        self.mediator = mediator
        self.sessions = SessionService(db)
        self.messages = MessageService(db)
        self.settings = MediatorSettingsService(db)

    async def start_session(
        self,
        initiator_id: str,
        topic: Optional[str] = None,
        partnership_id: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> Tuple[MediationSession, SessionMessage]:
        """Create a session and store the mediator's welcome as its first message."""
        if partnership_id:
            self.sessions.ensure_partnership_member(partnership_id, initiator_id)

        topic = topic or DEFAULT_TOPIC
        personality = self.settings.get_personality(initiator_id)
        welcome = await self.mediator.generate_welcome(
            personality,
            SessionMode.SOLO.value,
            topic_context=topic if topic != DEFAULT_TOPIC else None,
        )

        try:
            session = self.sessions.create_session(
                partnership_id, initiator_id, topic, display_name=display_name, commit=False
            )
            welcome_message = self.messages.append(
                session.id, None, MessageRole.ASSISTANT, welcome, SessionStage.INTAKE, commit=False
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(session)
        self.db.refresh(welcome_message)
        return session, welcome_message

    async def record_turn(self, session_id: str, user_id: str, content: str) -> TurnResult:
        """
        Record a user message and the mediator's reply.

        Raises:
            NotFoundError: Unknown session
            MediationServiceError: The mediator failed; nothing was written
        """
        session = self.sessions.require_session(session_id)
        current_stage = session.stage
        history = self.messages.list(session_id)
        personality = self.settings.get_personality(user_id)

        try:
            response = await self.mediator.generate_response(
                history, current_stage, content, personality, session.session_mode
            )
        except MediationServiceError:
            raise
        except Exception as e:
            metrics_collector.increment_counter("mediation_errors_total")
            logger.error(f"Mediator failed for session {session_id}: {str(e)}", exc_info=True)
            raise MediationServiceError(f"Failed to generate response: {str(e)}") from e

        resulting_stage = self._resolve_stage(session_id, current_stage, response.next_stage)

        try:
            user_message = self.messages.append(
                session_id, user_id, MessageRole.USER, content, current_stage, commit=False
            )
            if resulting_stage != current_stage:
                self.sessions.update_stage(session_id, resulting_stage, commit=False)
            assistant_message = self.messages.append(
                session_id, None, MessageRole.ASSISTANT, response.message, resulting_stage, commit=False
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user_message)
        self.db.refresh(assistant_message)
        metrics_collector.increment_counter("messages_recorded_total", 2)

        if response.safety_alert:
            audit_logger.session_event(
                "session.safety_alert", session_id, alert_type=response.safety_alert.type, user_id=user_id
            )

        return TurnResult(
            user_message=user_message,
            assistant_message=assistant_message,
            stage=resulting_stage,
            next_stage=resulting_stage if resulting_stage != current_stage else None,
            safety_alert=response.safety_alert,
        )

    def _resolve_stage(self, session_id: str, current_stage: str, proposed: Optional[str]) -> str:
        """The stage the session should be in after this turn.

        Proposals that are missing, repeat the current stage, or are not a
        legal protocol move leave the stage unchanged.
        """
        if not proposed or proposed == current_stage:
            return current_stage

        try:
            if can_advance(current_stage, proposed):
                return proposed
            reason = f"'{proposed}' is not the stage after '{current_stage}'"
        except InvalidInputError as e:
            reason = e.message

        metrics_collector.increment_counter("stage_transitions_rejected_total")
        logger.warning(f"Ignoring stage proposal for session {session_id}: {reason}")
        audit_logger.rejected(
            "session.stage_rejected", session_id, reason=reason, current=current_stage, proposed=proposed
        )
        return current_stage
