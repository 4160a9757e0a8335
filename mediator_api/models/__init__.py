"""SQLModel tables for the mediation service."""

from .mediator_settings import MediatorSettings
from .message import MessageRole, SessionMessage
from .participant import ParticipantRole, SessionParticipant
from .partnership import Partnership, PartnershipStatus
from .session import MediationSession, SessionMode, SessionStage, SessionStatus

__all__ = [
    "MediationSession",
    "MediatorSettings",
    "MessageRole",
    "ParticipantRole",
    "Partnership",
    "PartnershipStatus",
    "SessionMessage",
    "SessionMode",
    "SessionParticipant",
    "SessionStage",
    "SessionStatus",
]
