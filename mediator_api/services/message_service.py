"""
Message Service

Append-only log of session turns.
"""

from typing import List, Optional, Union

from sqlalchemy import func
from sqlmodel import Session, select

from mediator_api.errors import NotFoundError
from mediator_api.models.message import MessageRole, SessionMessage
from mediator_api.models.session import MediationSession, SessionStage
from mediator_api.services.stage_machine import parse_stage
from mediator_api.utils.clock import utc_now

RECENT_WINDOW = 50


class MessageService:
    """Service for recording and reading session messages"""

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        session_id: str,
        user_id: Optional[str],
        role: Union[MessageRole, str],
        content: str,
        stage: Union[SessionStage, str],
        commit: bool = True,
    ) -> SessionMessage:
        """Append a message and bump the session's updated_at.

        With commit=False the caller owns the transaction and the message is
        only flushed, so it gets its id and keeps its position in the log.
        """
        session = self.db.get(MediationSession, session_id)
        if not session:
            raise NotFoundError("Session not found", details={"session_id": session_id})

        now = utc_now()
        message = SessionMessage(
            session_id=session_id,
            user_id=user_id,
            role=MessageRole(role).value,
            content=content,
            stage=parse_stage(stage).value,
            created_at=now,
        )
        self.db.add(message)
        session.updated_at = now
        self.db.add(session)

        if commit:
            self.db.commit()
            self.db.refresh(message)
        else:
            self.db.flush()
        return message

    def list(self, session_id: str) -> List[SessionMessage]:
        """Full history, oldest first"""
        statement = (
            select(SessionMessage)
            .where(SessionMessage.session_id == session_id)
            .order_by(SessionMessage.created_at, SessionMessage.id)
        )
        return list(self.db.exec(statement).all())

    def recent(self, session_id: str, limit: int = RECENT_WINDOW) -> List[SessionMessage]:
        """Most recent messages first, capped at `limit`"""
        statement = (
            select(SessionMessage)
            .where(SessionMessage.session_id == session_id)
            .order_by(SessionMessage.created_at.desc(), SessionMessage.id.desc())
            .limit(limit)
        )
        return list(self.db.exec(statement).all())

    def count(self, session_id: str) -> int:
        statement = select(func.count()).select_from(SessionMessage).where(SessionMessage.session_id == session_id)
        return self.db.exec(statement).one()
