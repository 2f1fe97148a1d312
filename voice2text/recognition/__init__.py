"""Streaming speech recognition for Voice2Text."""

from .base import AbstractRecognitionProvider, RecognitionChannel, RecognitionError, ResultCallback
from .google_backend import GoogleStreamingRecognitionProvider, GoogleRecognitionChannel
from .publisher import SessionPublisher, TRANSCRIPT_TOPIC, LIFECYCLE_TOPIC

__all__ = [
    "AbstractRecognitionProvider",
    "RecognitionChannel",
    "RecognitionError",
    "ResultCallback",
    "GoogleStreamingRecognitionProvider",
    "GoogleRecognitionChannel",
    "SessionPublisher",
    "TRANSCRIPT_TOPIC",
    "LIFECYCLE_TOPIC",
]
