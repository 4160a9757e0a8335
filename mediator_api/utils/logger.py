"""
Audit logging for session lifecycle events.

Writes one JSON document per event so the trail can be shipped to a log
pipeline and queried by session id.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional


class AuditLogger:
    """JSON audit logger for mediation sessions."""

    def __init__(self, name: str, level: int = logging.INFO):
        """
        Initialize audit logger.

        Args:
            name: Logger name
            level: Logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Prevent adding handlers multiple times
        if not self.logger.handlers:
            self._setup_handlers()

    def _setup_handlers(self):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def _emit(self, level: int, event: str, session_id: Optional[str], **fields: Any):
        if not self.logger.isEnabledFor(level):
            return

        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "session_id": session_id,
        }
        record.update(fields)
        self.logger.log(level, json.dumps(record, default=str))

    def session_event(self, event: str, session_id: Optional[str] = None, **fields: Any):
        """Log a successful lifecycle event (session.created, invite.generated, ...)."""
        self._emit(logging.INFO, event, session_id, **fields)

    def rejected(self, event: str, session_id: Optional[str] = None, reason: str = "", **fields: Any):
        """Log a lifecycle action that was refused."""
        self._emit(logging.WARNING, event, session_id, reason=reason, **fields)


audit_logger = AuditLogger("mediator_api.audit")
