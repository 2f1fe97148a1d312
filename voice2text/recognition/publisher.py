"""Session event publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.events import TranscriptEvent, SessionEvent

logger = logging.getLogger(__name__)

TRANSCRIPT_TOPIC = "session.transcript"
LIFECYCLE_TOPIC = "session.lifecycle"


class SessionPublisher:
    """Publishes transcripts and session lifecycle changes using pubsub.pub."""

    def __init__(self, transcript_topic: str = TRANSCRIPT_TOPIC, lifecycle_topic: str = LIFECYCLE_TOPIC):
        """Initialize session publisher.

        Args:
            transcript_topic: Pub/sub topic name for transcripts
            lifecycle_topic: Pub/sub topic name for lifecycle events
        """
        self.transcript_topic = transcript_topic
        self.lifecycle_topic = lifecycle_topic
        logger.info(f"SessionPublisher initialized with topics: {transcript_topic}, {lifecycle_topic}")

    def publish_transcript(self, event: TranscriptEvent) -> None:
        pub.sendMessage(self.transcript_topic, event=event)
        logger.debug(f"Published transcript for {event.session_id} (final={event.is_final})")

    def publish_lifecycle(self, event: SessionEvent) -> None:
        pub.sendMessage(self.lifecycle_topic, event=event)
        logger.debug(f"Published session {event.event_type}: {event.session_id}")
