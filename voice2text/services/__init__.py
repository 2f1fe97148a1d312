"""Services layer for Voice2Text application logic."""

from .dispatcher import MainThreadDispatcher
from .notifications import Notifier, NOTICE_TOPIC
from .recording_session import (
    RecordingSession,
    RecordingSessionController,
    SessionState,
    ChannelAllocationError,
)
from .language_selector import LanguageSelector, LanguageOption, DEFAULT_LANGUAGES, load_language_options
from .speech_trigger import SpeechTrigger
from .scan_flow import ScanToTextFlow, ScanLog, ScanState, join_page_text

__all__ = [
    "MainThreadDispatcher",
    "Notifier",
    "NOTICE_TOPIC",
    "RecordingSession",
    "RecordingSessionController",
    "SessionState",
    "ChannelAllocationError",
    "LanguageSelector",
    "LanguageOption",
    "DEFAULT_LANGUAGES",
    "load_language_options",
    "SpeechTrigger",
    "ScanToTextFlow",
    "ScanLog",
    "ScanState",
    "join_page_text",
]
