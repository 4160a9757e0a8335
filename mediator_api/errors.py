"""
Domain errors for the mediation service.

Services raise these; routers let them propagate and the application-level
handler in main.py renders them. Each error carries a stable code, a
user-facing message and optional details.
"""

from typing import Any, Dict, Optional

from fastapi import status


class MediationError(Exception):
    """Base exception for mediation service errors"""
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnauthorizedError(MediationError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(MediationError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(MediationError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(MediationError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(MediationError):
    """Request is well-formed but the session state does not allow it."""
    code = "CONFLICT"
    status_code = status.HTTP_400_BAD_REQUEST


class InviteError(ConflictError):
    """Invite code could not be used to join a session."""


class StageTransitionError(ConflictError):
    """A stage change that does not follow the conversation protocol."""


class StatusTransitionError(ConflictError):
    """A status change that the session lifecycle does not allow."""


class MediationServiceError(MediationError):
    """The mediation model failed or is not configured.

    The message is never shown to clients; the cause is logged server-side.
    """
    code = "MEDIATION_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
