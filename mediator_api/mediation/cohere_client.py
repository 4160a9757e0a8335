"""
Cohere Mediation Client

Generates mediator replies with Cohere's chat models.

Each user turn makes two calls: a short safety classification of the new
message, then (when safe) the mediator reply built from the NVC system prompt,
the user's personality preferences and the current stage's instructions.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import cohere

from mediator_api.config import (
    COHERE_API_KEY,
    COHERE_MODEL,
    COHERE_SAFETY_MODEL,
    COHERE_TEMPERATURE,
)
from mediator_api.errors import MediationServiceError
from mediator_api.mediation.client import MediationClient, MediationResponse, SafetyAlert
from mediator_api.mediation.personality import MediatorPersonality, build_personality_prompt
from mediator_api.mediation.prompts import (
    COLLABORATIVE_SYSTEM_PROMPT,
    COLLABORATIVE_WELCOME_PROMPT,
    COLLABORATIVE_WELCOME_WITH_TOPIC,
    CRISIS_RESOURCES,
    ESCALATION_RESPONSE,
    FALLBACK_COLLABORATIVE_WELCOME,
    FALLBACK_WELCOME,
    PROGRESS_INDICATORS,
    SAFETY_PROMPT,
    SOLO_WELCOME_PROMPT,
    SOLO_WELCOME_WITH_TOPIC,
    STAGE_PROMPTS,
    SYSTEM_PROMPT,
)
from mediator_api.models.message import MessageRole, SessionMessage
from mediator_api.models.session import SessionMode
from mediator_api.services.stage_machine import is_terminal, next_stage
from mediator_api.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)

# Cohere chat_history roles
COHERE_ROLES = {
    MessageRole.USER.value: "USER",
    MessageRole.ASSISTANT.value: "CHATBOT",
    MessageRole.SYSTEM.value: "SYSTEM",
}

SAFE_RESULT = {"safe": True, "concerns": {"crisis": False, "abuse": False, "escalation": False}}


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Pull the first {...} block out of a model reply."""
    start_idx = text.find("{")
    end_idx = text.rfind("}") + 1
    if start_idx == -1 or end_idx == 0:
        return None
    try:
        result = json.loads(text[start_idx:end_idx])
    except json.JSONDecodeError:
        return None
    return result if isinstance(result, dict) else None


def propose_next_stage(current_stage: str, reply: str) -> Optional[str]:
    """Suggest the successor stage when the reply sounds like the stage is done."""
    if is_terminal(current_stage):
        return None
    reply_lower = reply.lower()
    if not any(indicator in reply_lower for indicator in PROGRESS_INDICATORS):
        return None

    return next_stage(current_stage).value


class CohereMediationClient(MediationClient):
    """
    Mediator backed by Cohere chat.

    Responsibilities:
    - Screen each user message for crisis, abuse and escalation
    - Generate the stage-appropriate mediator reply
    - Propose when the conversation should move to the next stage
    """

    def __init__(
        self,
        api_key: Optional[str] = COHERE_API_KEY,
        model: str = COHERE_MODEL,
        safety_model: str = COHERE_SAFETY_MODEL,
        temperature: float = COHERE_TEMPERATURE,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.safety_model = safety_model
        self.temperature = temperature

        if client is not None:
            self.client = client
        elif api_key:
            self.client = cohere.AsyncClient(api_key=api_key)
        else:
            self.client = None

        if self.client is not None:
            logger.info(f"Cohere mediation client initialized with model: {self.model}")
        else:
            logger.warning("Cohere mediation client disabled - COHERE_API_KEY not set")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def check_safety(self, message: str) -> Dict[str, Any]:
        """Classify a message; any failure to classify counts as safe."""
        try:
            response = await self.client.chat(
                model=self.safety_model,
                message=f'{SAFETY_PROMPT}\n\nMessage to analyze: "{message}"',
                temperature=0.0,
                max_tokens=256,
            )
        except Exception as e:
            logger.error(f"Safety check failed, treating message as safe: {str(e)}")
            return SAFE_RESULT

        result = parse_json_object(response.text or "")
        if result is None:
            logger.warning("Safety check returned no JSON, treating message as safe")
            return SAFE_RESULT
        return result

    def _safety_response(self, result: Dict[str, Any]) -> Optional[MediationResponse]:
        if result.get("safe", True):
            return None

        concerns = result.get("concerns") or {}
        if concerns.get("crisis"):
            return MediationResponse(
                message=CRISIS_RESOURCES,
                safety_alert=SafetyAlert(type="crisis", message="Crisis indicators detected"),
            )
        if concerns.get("abuse"):
            return MediationResponse(
                message=CRISIS_RESOURCES,
                safety_alert=SafetyAlert(type="abuse", message="Potential abuse indicators detected"),
            )
        if concerns.get("escalation"):
            return MediationResponse(
                message=ESCALATION_RESPONSE,
                safety_alert=SafetyAlert(type="escalation", message="Escalation detected"),
            )
        return None

    def _chat_history(self, history: Sequence[SessionMessage]) -> List[Dict[str, str]]:
        return [
            {"role": COHERE_ROLES.get(msg.role, "USER"), "message": msg.content}
            for msg in history
        ]

    def _preamble(self, personality: MediatorPersonality, current_stage: str, session_mode: str) -> str:
        collaborative = session_mode == SessionMode.COLLABORATIVE.value
        system_prompt = COLLABORATIVE_SYSTEM_PROMPT if collaborative else SYSTEM_PROMPT
        return (
            f"{system_prompt}\n\n"
            f"{build_personality_prompt(personality)}\n\n"
            f"Current stage: {current_stage}\n\n"
            f"{STAGE_PROMPTS.get(current_stage, '')}"
        )

    async def generate_response(
        self,
        history: Sequence[SessionMessage],
        current_stage: str,
        new_message: str,
        personality: MediatorPersonality,
        session_mode: str = SessionMode.SOLO.value,
    ) -> MediationResponse:
        if not self.enabled:
            raise MediationServiceError("Mediation model is not configured")

        safety = await self.check_safety(new_message)
        flagged = self._safety_response(safety)
        if flagged:
            logger.warning(f"Safety alert raised: {flagged.safety_alert.type}")
            return flagged

        try:
            response = await self.client.chat(
                model=self.model,
                message=new_message,
                chat_history=self._chat_history(history),
                preamble=self._preamble(personality, current_stage, session_mode),
                temperature=self.temperature,
                max_tokens=1024,
            )
        except Exception as e:
            metrics_collector.increment_counter("mediation_errors_total")
            logger.error(f"Cohere chat failed: {str(e)}", exc_info=True)
            raise MediationServiceError(f"Failed to generate response: {str(e)}")

        text = response.text or ""
        return MediationResponse(message=text, next_stage=propose_next_stage(current_stage, text))

    async def generate_welcome(
        self,
        personality: MediatorPersonality,
        session_mode: str = SessionMode.SOLO.value,
        topic_context: Optional[str] = None,
    ) -> str:
        collaborative = session_mode == SessionMode.COLLABORATIVE.value
        fallback = FALLBACK_COLLABORATIVE_WELCOME if collaborative else FALLBACK_WELCOME

        if not self.enabled:
            return fallback

        if collaborative:
            prompt = COLLABORATIVE_WELCOME_WITH_TOPIC.format(topic=topic_context) if topic_context else COLLABORATIVE_WELCOME_PROMPT
        else:
            prompt = SOLO_WELCOME_WITH_TOPIC.format(topic=topic_context) if topic_context else SOLO_WELCOME_PROMPT

        system_prompt = COLLABORATIVE_SYSTEM_PROMPT if collaborative else SYSTEM_PROMPT
        try:
            response = await self.client.chat(
                model=self.model,
                message=prompt,
                preamble=f"{system_prompt}\n\n{build_personality_prompt(personality)}",
                temperature=self.temperature,
                max_tokens=512,
            )
        except Exception as e:
            logger.error(f"Welcome message generation failed: {str(e)}")
            return fallback

        return response.text or fallback
