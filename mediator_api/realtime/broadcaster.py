"""Real-time session events over Dapr pub/sub."""
import json
import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional

from dapr.clients import DaprClient

from mediator_api.config import DAPR_PUBSUB_NAME, REALTIME_ENABLED
from mediator_api.utils.clock import utc_now
from mediator_api.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    NEW_MESSAGE = "new-message"
    TYPING_START = "typing-start"
    TYPING_STOP = "typing-stop"
    SESSION_UPDATED = "session-updated"
    USER_JOINED = "user-joined"


def session_channel(session_id: str) -> str:
    return f"session-{session_id}"


class SessionBroadcaster:
    """Publishes session events to per-session topics.

    Delivery is best effort: failures are logged and counted, never raised.
    With realtime disabled, events are only logged.
    """

    def __init__(self, pubsub_name: str = DAPR_PUBSUB_NAME, enabled: bool = REALTIME_ENABLED, source: str = "mediator-api"):
        self.pubsub_name = pubsub_name
        self.enabled = enabled
        self.source = source
        if not self.enabled:
            logger.warning("Realtime disabled. Session events will be logged instead of published.")

    @metrics_collector.time_operation("broadcast_publish_seconds")
    def publish(self, session_id: str, event: SessionEvent, data: Dict[str, Any]) -> bool:
        """Publish one event. Returns True when the event was handed to Dapr (or logged in dev mode)."""
        topic = session_channel(session_id)
        event_type = SessionEvent(event).value

        if not self.enabled:
            logger.info(f"[DEV MODE] Would publish to topic '{topic}': {event_type} with data {data}")
            return True

        envelope = {
            "event_id": str(uuid.uuid4()),
            "type": event_type,
            "timestamp": utc_now().isoformat(),
            "source": self.source,
            "data": data,
        }

        try:
            with DaprClient() as client:
                client.publish_event(
                    pubsub_name=self.pubsub_name,
                    topic_name=topic,
                    data=json.dumps(envelope, default=str),
                    data_content_type="application/json",
                )
        except Exception as e:
            metrics_collector.increment_counter("broadcast_failures_total")
            logger.error(f"Failed to publish {event_type} to topic {topic}: {str(e)}")
            return False

        logger.debug(f"Published {event_type} to topic {topic}")
        return True

    def publish_new_message(self, session_id: str, message: Dict[str, Any]) -> bool:
        return self.publish(session_id, SessionEvent.NEW_MESSAGE, message)

    def publish_typing(self, session_id: str, user_id: str, user_name: Optional[str], is_typing: bool) -> bool:
        event = SessionEvent.TYPING_START if is_typing else SessionEvent.TYPING_STOP
        return self.publish(
            session_id,
            event,
            {"userId": user_id, "userName": user_name or "User", "isTyping": is_typing},
        )

    def publish_session_updated(self, session_id: str, stage: str, status: str) -> bool:
        return self.publish(
            session_id,
            SessionEvent.SESSION_UPDATED,
            {"sessionId": session_id, "stage": stage, "status": status},
        )

    def publish_user_joined(self, session_id: str, user_id: str, display_name: Optional[str]) -> bool:
        return self.publish(
            session_id,
            SessionEvent.USER_JOINED,
            {"userId": user_id, "displayName": display_name},
        )
