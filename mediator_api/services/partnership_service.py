"""Partnership service: standing relationships between two users."""
import logging
import secrets
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from mediator_api.errors import ConflictError, ForbiddenError, NotFoundError
from mediator_api.models.partnership import Partnership, PartnershipStatus
from mediator_api.utils.clock import utc_now

logger = logging.getLogger(__name__)


class PartnershipService:
    """Service for creating, accepting and ending partnerships"""

    def __init__(self, db: Session):
        self.db = db

    def create_partnership(self, user_id: str) -> Partnership:
        partnership = Partnership(
            user1_id=user_id,
            invite_code=secrets.token_urlsafe(8)[:10],
            status=PartnershipStatus.PENDING.value,
        )
        self.db.add(partnership)
        self.db.commit()
        self.db.refresh(partnership)
        logger.info(f"Partnership {partnership.id} created by user {user_id}")
        return partnership

    def accept_invite(self, invite_code: str, user_id: str) -> Partnership:
        """
        Raises:
            NotFoundError: No pending partnership with this code
            ConflictError: User tried to accept their own invite
        """
        statement = select(Partnership).where(
            Partnership.invite_code == invite_code,
            Partnership.status == PartnershipStatus.PENDING.value,
        )
        partnership = self.db.exec(statement).first()
        if not partnership:
            raise NotFoundError("Invalid or expired invite code")

        if partnership.user1_id == user_id:
            raise ConflictError("You cannot accept your own invite")

        partnership.user2_id = user_id
        partnership.status = PartnershipStatus.ACTIVE.value
        partnership.updated_at = utc_now()
        self.db.add(partnership)
        self.db.commit()
        self.db.refresh(partnership)
        return partnership

    def get_partnership(self, partnership_id: str) -> Optional[Partnership]:
        return self.db.get(Partnership, partnership_id)

    def get_user_partnerships(self, user_id: str) -> List[Partnership]:
        statement = (
            select(Partnership)
            .where(or_(Partnership.user1_id == user_id, Partnership.user2_id == user_id))
            .order_by(Partnership.created_at.desc())
        )
        return list(self.db.exec(statement).all())

    def end_partnership(self, partnership_id: str, user_id: str) -> Partnership:
        partnership = self.get_partnership(partnership_id)
        if not partnership:
            raise NotFoundError("Partnership not found")

        if not partnership.has_member(user_id):
            raise ForbiddenError("Not authorized")

        partnership.status = PartnershipStatus.ENDED.value
        partnership.updated_at = utc_now()
        self.db.add(partnership)
        self.db.commit()
        self.db.refresh(partnership)
        return partnership
