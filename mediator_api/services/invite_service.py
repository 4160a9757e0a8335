"""
Invite Service

Issues, reports, revokes and redeems the single-use join code that admits a
partner into a session.

Redeeming a code registers the partner and clears the code in the same
transaction, so a code works exactly once. The participant table's
(session, slot) unique constraint settles concurrent redemptions: the loser's
commit fails and is reported as a conflict.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from mediator_api.config import APP_BASE_URL, INVITE_EXPIRY_HOURS
from mediator_api.errors import ConflictError, InviteError
from mediator_api.models.participant import MAX_PARTICIPANTS, ParticipantRole
from mediator_api.models.session import MediationSession, SessionMode, SessionStatus
from mediator_api.services.participant_service import ParticipantService
from mediator_api.services.session_service import SessionService
from mediator_api.utils.clock import utc_now
from mediator_api.utils.logger import audit_logger
from mediator_api.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)

# No 0/O or 1/I so codes survive being read aloud or retyped
INVITE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 8


@dataclass
class InviteInfo:
    code: str
    url: str
    expires_at: datetime


@dataclass
class InviteStatus:
    has_invite: bool
    is_expired: bool = False
    code: Optional[str] = None
    url: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass
class JoinResult:
    success: bool
    session_id: str
    already_joined: bool = False


@dataclass
class InvitePreview:
    session_id: str
    topic: str
    initiator_name: str
    status: str
    created_at: datetime


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(INVITE_ALPHABET) for _ in range(length))


def build_invite_url(code: str, base_url: str = APP_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/dashboard/sessions/join?code={code}"


def invite_expired(session: MediationSession, now: Optional[datetime] = None) -> bool:
    if session.invite_expires_at is None:
        return False
    return (now or utc_now()) > session.invite_expires_at


class InviteService:
    """Service for session invite codes"""

    def __init__(self, db: Session, base_url: str = APP_BASE_URL):
        self.db = db
        self.base_url = base_url
        self.sessions = SessionService(db)
        self.participants = ParticipantService(db)

    def generate_invite(self, session_id: str, expires_in_hours: int = INVITE_EXPIRY_HOURS) -> InviteInfo:
        """Issue a fresh code, replacing any previous one.

        Raises:
            NotFoundError: Unknown session
            ConflictError: Session is not active or already has a partner
        """
        session = self.sessions.require_session(session_id)

        if session.status != SessionStatus.ACTIVE.value:
            raise ConflictError("Cannot invite to an inactive session", details={"status": session.status})

        if self.participants.count(session_id) >= MAX_PARTICIPANTS:
            raise ConflictError("Session already has a partner")

        code = self._unused_code()
        expires_at = utc_now() + timedelta(hours=expires_in_hours)

        session.invite_code = code
        session.invite_expires_at = expires_at
        session.session_mode = SessionMode.COLLABORATIVE.value
        session.updated_at = utc_now()
        self.db.add(session)
        self.db.commit()

        metrics_collector.increment_counter("invites_generated_total")
        audit_logger.session_event("invite.generated", session_id, expires_at=expires_at.isoformat())
        return InviteInfo(code=code, url=build_invite_url(code, self.base_url), expires_at=expires_at)

    def _unused_code(self) -> str:
        while True:
            code = generate_invite_code()
            taken = self.db.exec(select(MediationSession.id).where(MediationSession.invite_code == code)).first()
            if not taken:
                return code

    def get_invite_status(self, session_id: str) -> InviteStatus:
        """Report the session's invite; an expired code is reported as absent."""
        session = self.sessions.require_session(session_id)

        if not session.invite_code:
            return InviteStatus(has_invite=False)

        if invite_expired(session):
            return InviteStatus(has_invite=False, is_expired=True, expires_at=session.invite_expires_at)

        return InviteStatus(
            has_invite=True,
            code=session.invite_code,
            url=build_invite_url(session.invite_code, self.base_url),
            expires_at=session.invite_expires_at,
        )

    def revoke_invite(self, session_id: str) -> None:
        session = self.sessions.require_session(session_id)
        session.invite_code = None
        session.invite_expires_at = None
        session.updated_at = utc_now()
        self.db.add(session)
        self.db.commit()
        audit_logger.session_event("invite.revoked", session_id)

    def _find_by_code(self, code: str) -> Optional[MediationSession]:
        statement = select(MediationSession).where(MediationSession.invite_code == code)
        return self.db.exec(statement).first()

    def preview_by_code(self, code: str) -> Optional[InvitePreview]:
        """Session summary shown before joining; None for unknown or expired codes."""
        session = self._find_by_code(code)
        if not session or invite_expired(session):
            return None

        initiator = self.participants.get_participant(session.id, session.initiator_id)
        return InvitePreview(
            session_id=session.id,
            topic=session.topic,
            initiator_name=(initiator.display_name if initiator and initiator.display_name else "Anonymous"),
            status=session.status,
            created_at=session.created_at,
        )

    def join_by_code(self, code: str, user_id: str, display_name: Optional[str] = None) -> JoinResult:
        """Redeem an invite code as the session's partner.

        Raises:
            InviteError: Unknown, expired or already redeemed code; inactive
                session; initiator joining their own session; session full
        """
        session = self._find_by_code(code)
        if not session:
            self._reject(None, user_id, "unknown_code")
            raise InviteError("Invalid invite code")

        if invite_expired(session):
            self._reject(session.id, user_id, "expired")
            raise InviteError("This invite has expired")

        if session.status != SessionStatus.ACTIVE.value:
            self._reject(session.id, user_id, "inactive")
            raise InviteError("This session is no longer active")

        existing = self.participants.get_participant(session.id, user_id)
        if session.initiator_id == user_id or (existing and existing.role == ParticipantRole.INITIATOR.value):
            self._reject(session.id, user_id, "self_join")
            raise InviteError("You are already the initiator of this session")

        if existing:
            return JoinResult(success=True, session_id=session.id, already_joined=True)

        if self.participants.count(session.id) >= MAX_PARTICIPANTS:
            self._reject(session.id, user_id, "full")
            raise InviteError("This session already has the maximum number of participants")

        session_id = session.id
        self.participants.add_partner(session_id, user_id, display_name)
        session.invite_code = None
        session.invite_expires_at = None
        session.updated_at = utc_now()
        self.db.add(session)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Concurrent join lost the partner slot for session {session_id}")
            self._reject(session_id, user_id, "slot_taken")
            raise InviteError("This session already has the maximum number of participants")

        metrics_collector.increment_counter("session_joins_total")
        audit_logger.session_event("session.joined", session_id, user_id=user_id)
        return JoinResult(success=True, session_id=session_id)

    def _reject(self, session_id: Optional[str], user_id: str, reason: str):
        metrics_collector.increment_counter("session_join_rejections_total")
        audit_logger.rejected("session.join_rejected", session_id, reason=reason, user_id=user_id)
