"""Audio publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.events import AudioEvent

logger = logging.getLogger(__name__)

AUDIO_TOPIC = "audio.frame"


class AudioPublisher:
    """Publishes audio events using pubsub.pub.

    Delivery is synchronous: every subscriber (the recording session's audio
    tap) receives the frame on the capture thread before the next read.
    """

    def __init__(self, topic: str = AUDIO_TOPIC):
        """Initialize audio publisher.

        Args:
            topic: Pub/sub topic name for audio events
        """
        self.topic = topic
        logger.info(f"AudioPublisher initialized with topic: {topic}")

    def publish_audio_event(self, audio_event: AudioEvent) -> None:
        """Publish an audio event to the pub/sub topic.

        Args:
            audio_event: AudioEvent to publish
        """
        pub.sendMessage(self.topic, event=audio_event)
