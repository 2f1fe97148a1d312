"""Recognition-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AuthorizationStatus(Enum):
    """Outcome of asking a recognition provider for access."""
    AUTHORIZED = "authorized"
    DENIED = "denied"
    RESTRICTED = "restricted"
    NOT_DETERMINED = "not_determined"


@dataclass
class RecognitionResult:
    """A transcript delivered by a recognition channel.

    Partial results replace each other; a final result is terminal for the
    channel that produced it.
    """
    text: str
    is_final: bool = False
    language: str = "en-US"
    timestamp: datetime = field(default_factory=datetime.now)
