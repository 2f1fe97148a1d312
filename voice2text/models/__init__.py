"""Data models for the Voice2Text application."""

from .audio import AudioStats
from .events import AudioEvent, TranscriptEvent, SessionEvent
from .transcription import AuthorizationStatus, RecognitionResult
from .scan import ScanRecord, ScanStatus, ScanOutcome, ScanResult
from .ui import DisplayState, Notice, START_LABEL, STOP_LABEL

__all__ = [
    "AudioStats",
    "AudioEvent",
    "TranscriptEvent",
    "SessionEvent",
    "AuthorizationStatus",
    "RecognitionResult",
    "ScanRecord",
    "ScanStatus",
    "ScanOutcome",
    "ScanResult",
    "DisplayState",
    "Notice",
    "START_LABEL",
    "STOP_LABEL",
]
