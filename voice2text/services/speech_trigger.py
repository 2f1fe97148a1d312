"""Speak button: reads the displayed text aloud, or stops reading."""

import logging
from typing import Optional

from ..models.ui import DisplayState
from ..synthesis import AbstractSynthesisProvider

logger = logging.getLogger(__name__)


class SpeechTrigger:
    """Toggle between speaking the displayed text and silence."""

    def __init__(self, provider: AbstractSynthesisProvider, display: DisplayState):
        self.provider = provider
        self.display = display

    def speak(self, text: Optional[str] = None) -> bool:
        """Stop speech if speaking, otherwise speak ``text`` (default: the displayed text).

        Returns:
            True if a new utterance was submitted
        """
        if self.provider.is_speaking:
            self.provider.stop()
            return False

        text = self.display.text if text is None else text
        if not text or not text.strip():
            logger.info("Nothing to speak")
            return False

        self.provider.speak(text)
        return True
