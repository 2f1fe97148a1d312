"""UI-related data models."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

START_LABEL = "Start Recording"
STOP_LABEL = "Stop Recording"

# Older notices fall off the front.
MAX_NOTICES = 50


@dataclass
class Notice:
    """A message for the user: an error alert or an informational notice."""
    title: str
    message: str
    level: str = "notice"  # "alert" | "notice"
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class DisplayState:
    """The single text display surface and the controls around it.

    Only mutated from the main context.
    """
    text: str = ""
    title: str = ""
    language_label: str = ""
    start_enabled: bool = False
    start_label: str = START_LABEL
    copied: bool = False
    notices: deque = field(default_factory=lambda: deque(maxlen=MAX_NOTICES))

    def show_text(self, text: str) -> None:
        self.text = text
        self.copied = False
