"""Audio capture and publishing module."""

from .capture import AudioCapture, AudioDeviceError
from .audio_pub import AudioPublisher, AUDIO_TOPIC

__all__ = [
    'AudioCapture',
    'AudioDeviceError',
    'AudioPublisher',
    'AUDIO_TOPIC',
]
