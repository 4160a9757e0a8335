"""
Mediation client interface.

The conversation engine talks to the model only through this interface. The
production implementation is CohereMediationClient; tests pass their own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from mediator_api.mediation.personality import MediatorPersonality
from mediator_api.models.message import SessionMessage


@dataclass
class SafetyAlert:
    """Safety signal raised by the mediator. type is crisis, abuse or escalation."""
    type: str
    message: str


@dataclass
class MediationResponse:
    """One mediator turn.

    next_stage is a proposal only; the engine decides whether it is a legal
    move. It is None when the mediator wants to stay in the current stage.
    """
    message: str
    next_stage: Optional[str] = None
    safety_alert: Optional[SafetyAlert] = None


class MediationClient(ABC):
    """Generates the mediator's side of the conversation."""

    @abstractmethod
    async def generate_response(
        self,
        history: Sequence[SessionMessage],
        current_stage: str,
        new_message: str,
        personality: MediatorPersonality,
        session_mode: str = "solo",
    ) -> MediationResponse:
        """
        Produce the reply to `new_message`.

        Args:
            history: Earlier messages, oldest first (excludes new_message)
            current_stage: Stage the session is in
            new_message: The user's newest message
            personality: Mediator style preferences of the author
            session_mode: solo or collaborative

        Raises:
            MediationServiceError: The model could not produce a reply
        """

    @abstractmethod
    async def generate_welcome(
        self,
        personality: MediatorPersonality,
        session_mode: str = "solo",
        topic_context: Optional[str] = None,
    ) -> str:
        """Opening message for a new session. Never raises."""
