"""Participant registry for mediation sessions."""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from mediator_api.errors import ForbiddenError, NotFoundError
from mediator_api.models.participant import (
    INITIATOR_SLOT,
    PARTNER_SLOT,
    ParticipantRole,
    SessionParticipant,
)
from mediator_api.models.session import MediationSession
from mediator_api.utils.clock import utc_now

logger = logging.getLogger(__name__)


class ParticipantService:
    """Membership queries and presence for session participants."""

    def __init__(self, db: Session):
        self.db = db

    def add_initiator(self, session_id: str, user_id: str, display_name: Optional[str] = None) -> SessionParticipant:
        """Stage the initiator row (slot 1). The caller commits."""
        participant = SessionParticipant(
            session_id=session_id,
            user_id=user_id,
            slot=INITIATOR_SLOT,
            role=ParticipantRole.INITIATOR.value,
            display_name=display_name,
            joined_at=utc_now(),
        )
        self.db.add(participant)
        return participant

    def add_partner(self, session_id: str, user_id: str, display_name: Optional[str] = None) -> SessionParticipant:
        """Stage the partner row (slot 2). The caller commits.

        A second partner for the same session violates the (session, slot)
        unique constraint at flush/commit time.
        """
        participant = SessionParticipant(
            session_id=session_id,
            user_id=user_id,
            slot=PARTNER_SLOT,
            role=ParticipantRole.PARTNER.value,
            display_name=display_name,
            joined_at=utc_now(),
        )
        self.db.add(participant)
        return participant

    def get_participants(self, session_id: str) -> List[SessionParticipant]:
        """Participants in join order."""
        statement = (
            select(SessionParticipant)
            .where(SessionParticipant.session_id == session_id)
            .order_by(SessionParticipant.slot, SessionParticipant.joined_at)
        )
        return list(self.db.exec(statement).all())

    def get_participant(self, session_id: str, user_id: str) -> Optional[SessionParticipant]:
        statement = select(SessionParticipant).where(
            SessionParticipant.session_id == session_id,
            SessionParticipant.user_id == user_id,
        )
        return self.db.exec(statement).first()

    def is_participant(self, session_id: str, user_id: str) -> bool:
        return self.get_participant(session_id, user_id) is not None

    def count(self, session_id: str) -> int:
        statement = (
            select(func.count())
            .select_from(SessionParticipant)
            .where(SessionParticipant.session_id == session_id)
        )
        return self.db.exec(statement).one()

    def has_access(self, session: MediationSession, user_id: str) -> bool:
        """A user may read/write a session iff they are the initiator or a registered participant."""
        if session.initiator_id == user_id:
            return True
        return self.is_participant(session.id, user_id)

    def require_access(self, session_id: str, user_id: str) -> MediationSession:
        """Load a session the user is a member of.

        Raises:
            NotFoundError: Unknown session
            ForbiddenError: User is neither initiator nor participant
        """
        session = self.db.get(MediationSession, session_id)
        if not session:
            raise NotFoundError("Session not found", details={"session_id": session_id})

        if not self.has_access(session, user_id):
            logger.warning(f"User {user_id} denied access to session {session_id}")
            raise ForbiddenError("Access denied")
        return session

    def update_last_seen(self, session_id: str, user_id: str) -> bool:
        """Stamp presence for a participant. Returns False when the user is not registered."""
        participant = self.get_participant(session_id, user_id)
        if not participant:
            return False

        participant.last_seen_at = utc_now()
        self.db.add(participant)
        self.db.commit()
        return True
