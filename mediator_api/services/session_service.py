"""
Session Service

Persistence for mediation sessions: creation, lookup, stage and status
changes. Stage and status writes are checked against the protocol transition
tables in stage_machine.
"""

from typing import Dict, List, Optional, Union

from sqlalchemy import or_
from sqlmodel import Session, select

from mediator_api.errors import ForbiddenError, NotFoundError
from mediator_api.models.participant import SessionParticipant
from mediator_api.models.partnership import Partnership
from mediator_api.models.session import (
    MediationSession,
    SessionMode,
    SessionStage,
    SessionStatus,
)
from mediator_api.services.participant_service import ParticipantService
from mediator_api.services.stage_machine import (
    INITIAL_STAGE,
    validate_stage_transition,
    validate_status_transition,
)
from mediator_api.utils.clock import utc_now
from mediator_api.utils.logger import audit_logger
from mediator_api.utils.metrics import metrics_collector


class SessionService:
    """Service for managing mediation sessions"""

    def __init__(self, db: Session):
        self.db = db
        self.participants = ParticipantService(db)

    def create_session(
        self,
        partnership_id: Optional[str],
        initiator_id: str,
        topic: str,
        display_name: Optional[str] = None,
        commit: bool = True,
    ) -> MediationSession:
        """Create a session in the first protocol stage and register its initiator."""
        if partnership_id:
            self.ensure_partnership_member(partnership_id, initiator_id)

        now = utc_now()
        session = MediationSession(
            partnership_id=partnership_id,
            initiator_id=initiator_id,
            topic=topic,
            stage=INITIAL_STAGE.value,
            status=SessionStatus.ACTIVE.value,
            session_mode=SessionMode.SOLO.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(session)
        self.db.flush()
        self.participants.add_initiator(session.id, initiator_id, display_name)

        if commit:
            self.db.commit()
            self.db.refresh(session)
        else:
            self.db.flush()

        metrics_collector.increment_counter("sessions_created_total")
        audit_logger.session_event(
            "session.created", session.id, initiator_id=initiator_id, partnership_id=partnership_id
        )
        return session

    def ensure_partnership_member(self, partnership_id: str, user_id: str) -> Partnership:
        partnership = self.db.get(Partnership, partnership_id)
        if not partnership:
            raise NotFoundError("Partnership not found", details={"partnership_id": partnership_id})
        if not partnership.has_member(user_id):
            raise ForbiddenError("Not a member of this partnership")
        return partnership

    def get_session(self, session_id: str) -> Optional[MediationSession]:
        return self.db.get(MediationSession, session_id)

    def require_session(self, session_id: str) -> MediationSession:
        session = self.get_session(session_id)
        if not session:
            raise NotFoundError("Session not found", details={"session_id": session_id})
        return session

    def get_user_sessions(self, user_id: str) -> List[MediationSession]:
        """Sessions the user started or joined, most recently active first"""
        joined = select(SessionParticipant.session_id).where(SessionParticipant.user_id == user_id)
        statement = (
            select(MediationSession)
            .where(or_(MediationSession.initiator_id == user_id, MediationSession.id.in_(joined)))
            .order_by(MediationSession.updated_at.desc())
        )
        return list(self.db.exec(statement).all())

    def get_session_counts(self, user_id: str) -> Dict[str, int]:
        statement = select(MediationSession.status).where(MediationSession.initiator_id == user_id)
        statuses = list(self.db.exec(statement).all())
        return {
            "active": statuses.count(SessionStatus.ACTIVE.value),
            "paused": statuses.count(SessionStatus.PAUSED.value),
            "completed": statuses.count(SessionStatus.COMPLETED.value),
            "total": len(statuses),
        }

    def update_stage(
        self,
        session_id: str,
        stage: Union[SessionStage, str],
        commit: bool = True,
    ) -> MediationSession:
        """Advance the session to `stage`.

        Raises:
            NotFoundError: Unknown session
            InvalidInputError: `stage` is not a protocol stage
            StageTransitionError: `stage` is not the current stage's successor
        """
        session = self.require_session(session_id)
        previous = session.stage
        target = validate_stage_transition(session.stage, stage)

        session.stage = target.value
        session.updated_at = utc_now()
        self.db.add(session)

        if commit:
            self.db.commit()
            self.db.refresh(session)

        metrics_collector.increment_counter("stage_advances_total")
        audit_logger.session_event("session.stage_advanced", session_id, previous=previous, stage=target.value)
        return session

    def update_status(
        self,
        session_id: str,
        status: Union[SessionStatus, str],
        commit: bool = True,
    ) -> MediationSession:
        """Change the session status following the session lifecycle.

        Raises:
            NotFoundError: Unknown session
            InvalidInputError: Unknown status value
            StatusTransitionError: Move not allowed from the current status
        """
        session = self.require_session(session_id)
        previous = session.status
        target = validate_status_transition(session.status, status)

        session.status = target.value
        session.updated_at = utc_now()
        self.db.add(session)

        if commit:
            self.db.commit()
            self.db.refresh(session)

        audit_logger.session_event("session.status_changed", session_id, previous=previous, status=target.value)
        return session
