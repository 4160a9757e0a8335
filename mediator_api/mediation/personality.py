"""Mediator personality preferences and the prompt section built from them."""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from mediator_api.models.mediator_settings import (
    MediatorFormality,
    MediatorResponseLength,
    MediatorTone,
)


@dataclass
class MediatorPersonality:
    tone: str = MediatorTone.WARM.value
    formality: str = MediatorFormality.BALANCED.value
    response_length: str = MediatorResponseLength.MODERATE.value
    use_emoji: bool = False
    use_metaphors: bool = True
    cultural_context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_PERSONALITY = MediatorPersonality()

TONE_PROMPTS = {
    MediatorTone.WARM.value: (
        "Use a warm, empathetic tone. Express genuine care and make the person feel heard, "
        "with phrases like \"I understand\" and \"Thank you for sharing.\""
    ),
    MediatorTone.PROFESSIONAL.value: (
        "Keep a composed, professional tone. Be supportive but structured, clear and respectful "
        "without sounding cold."
    ),
    MediatorTone.DIRECT.value: (
        "Be direct and to the point while staying respectful. Avoid hedging and over-explaining."
    ),
    MediatorTone.GENTLE.value: (
        "Be especially gentle and reassuring. Take extra care with sensitive topics and validate "
        "feelings often."
    ),
}

FORMALITY_PROMPTS = {
    MediatorFormality.CASUAL.value: "Use casual, conversational language with contractions.",
    MediatorFormality.BALANCED.value: (
        "Mix professional and conversational language and adapt to the user's own style."
    ),
    MediatorFormality.FORMAL.value: "Use formal language, complete sentences and no colloquialisms.",
}

RESPONSE_LENGTH_PROMPTS = {
    MediatorResponseLength.CONCISE.value: "Keep replies to two or three sentences.",
    MediatorResponseLength.MODERATE.value: "Reply in three to five sentences with enough context to help.",
    MediatorResponseLength.DETAILED.value: "Give thorough replies with examples and nuance.",
}


def build_personality_prompt(personality: MediatorPersonality) -> str:
    """Prompt section describing how the mediator should sound."""
    sections = [
        "## Communication Style",
        TONE_PROMPTS.get(personality.tone, TONE_PROMPTS[MediatorTone.WARM.value]),
        "## Language Formality",
        FORMALITY_PROMPTS.get(personality.formality, FORMALITY_PROMPTS[MediatorFormality.BALANCED.value]),
        "## Response Length",
        RESPONSE_LENGTH_PROMPTS.get(
            personality.response_length, RESPONSE_LENGTH_PROMPTS[MediatorResponseLength.MODERATE.value]
        ),
        "## Emoji Usage",
        "Use emojis sparingly to add warmth." if personality.use_emoji else "Do not use emojis.",
        "## Metaphors and Analogies",
        (
            "Use everyday metaphors when they make an idea easier to grasp."
            if personality.use_metaphors
            else "Avoid metaphors; explain things literally."
        ),
    ]

    if personality.cultural_context:
        sections.append("## Cultural Considerations")
        sections.append(
            f'The user asked you to keep this cultural context in mind: "{personality.cultural_context}".'
        )

    return "\n\n".join(sections)
