"""Mediator collaborator: interface, prompts and the Cohere implementation."""

from .client import MediationClient, MediationResponse, SafetyAlert
from .cohere_client import CohereMediationClient
from .personality import DEFAULT_PERSONALITY, MediatorPersonality

__all__ = [
    "CohereMediationClient",
    "DEFAULT_PERSONALITY",
    "MediationClient",
    "MediationResponse",
    "MediatorPersonality",
    "SafetyAlert",
]
