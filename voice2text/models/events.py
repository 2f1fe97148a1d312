"""Event models for pub/sub audio and recognition processing."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Any, Dict


@dataclass
class AudioEvent:
    """Audio chunk event with metadata."""
    chunk_id: str
    audio_data: bytes
    timestamp: float  # Unix timestamp when chunk was captured
    sequence_number: int
    sample_rate: int = 16000
    channels: int = 1
    chunk_duration_ms: Optional[int] = None  # Duration of this chunk in milliseconds
    final: bool = False  # True if this is the final chunk of the capture

    def __post_init__(self):
        """Calculate chunk duration if not provided."""
        if self.chunk_duration_ms is None and self.audio_data:
            # 16-bit audio (2 bytes per sample)
            bytes_per_second = self.sample_rate * self.channels * 2
            duration_seconds = len(self.audio_data) / bytes_per_second
            self.chunk_duration_ms = int(duration_seconds * 1000)


@dataclass
class TranscriptEvent:
    """Transcript delivered for a recording session."""
    session_id: str
    text: str
    is_final: bool
    language: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class SessionEvent:
    """Session lifecycle event."""
    session_id: str
    event_type: str  # "started", "stopping", "finished", "error", "cancelled"
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)
