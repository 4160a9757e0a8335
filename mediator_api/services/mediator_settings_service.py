"""Mediator personality settings service."""
from typing import Any, Dict, Optional

from sqlmodel import Session, select

from mediator_api.mediation.personality import DEFAULT_PERSONALITY, MediatorPersonality
from mediator_api.models.mediator_settings import MediatorSettings
from mediator_api.utils.clock import utc_now

SETTING_FIELDS = ("tone", "formality", "response_length", "use_emoji", "use_metaphors", "cultural_context")


def to_personality(settings: MediatorSettings) -> MediatorPersonality:
    return MediatorPersonality(
        tone=settings.tone,
        formality=settings.formality,
        response_length=settings.response_length,
        use_emoji=settings.use_emoji,
        use_metaphors=settings.use_metaphors,
        cultural_context=settings.cultural_context,
    )


class MediatorSettingsService:
    """Read and write a user's mediator personality."""

    def __init__(self, db: Session):
        self.db = db

    def get_record(self, user_id: str) -> Optional[MediatorSettings]:
        statement = select(MediatorSettings).where(MediatorSettings.user_id == user_id)
        return self.db.exec(statement).first()

    def get_personality(self, user_id: str) -> MediatorPersonality:
        """The user's personality, or the defaults when nothing is stored."""
        record = self.get_record(user_id)
        if not record:
            return MediatorPersonality(**DEFAULT_PERSONALITY.to_dict())
        return to_personality(record)

    def update(self, user_id: str, changes: Dict[str, Any]) -> MediatorPersonality:
        """Create or update settings; only keys present in `changes` are written."""
        changes = {key: value for key, value in changes.items() if key in SETTING_FIELDS}
        record = self.get_record(user_id)

        if record:
            for key, value in changes.items():
                setattr(record, key, value)
            record.updated_at = utc_now()
        else:
            values = DEFAULT_PERSONALITY.to_dict()
            values.update(changes)
            record = MediatorSettings(user_id=user_id, **values)

        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return to_personality(record)

    def reset(self, user_id: str) -> MediatorPersonality:
        record = self.get_record(user_id)
        if record:
            self.db.delete(record)
            self.db.commit()
        return MediatorPersonality(**DEFAULT_PERSONALITY.to_dict())
