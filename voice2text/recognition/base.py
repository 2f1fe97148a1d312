"""Abstract base classes for streaming recognition providers."""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import logging

from ..models.transcription import AuthorizationStatus, RecognitionResult

logger = logging.getLogger(__name__)

# Called from the provider's thread with either a result or an error.
ResultCallback = Callable[[Optional[RecognitionResult], Optional[Exception]], None]

# Called from any thread when the service becomes usable or unusable.
AvailabilityListener = Callable[[bool], None]


class RecognitionError(RuntimeError):
    """The recognition service failed while a channel was streaming."""


class RecognitionChannel(ABC):
    """A live streaming session that accepts audio and emits transcripts."""

    @abstractmethod
    def append(self, audio_chunk: bytes) -> None:
        """Forward one captured audio chunk. Ignored after end_audio() or cancel()."""
        pass

    @abstractmethod
    def end_audio(self) -> None:
        """Signal end-of-audio so the service can flush a final result."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Abandon the channel. No further results are delivered."""
        pass


class AbstractRecognitionProvider(ABC):
    """Abstract base class for streaming recognition providers."""

    _availability_listener: Optional[AvailabilityListener] = None

    def set_availability_listener(self, listener: Optional[AvailabilityListener]) -> None:
        """Register the single receiver of availability changes."""
        self._availability_listener = listener

    def notify_availability(self, available: bool) -> None:
        listener = self._availability_listener
        if listener is not None:
            listener(available)

    @abstractmethod
    def request_authorization(self) -> AuthorizationStatus:
        """Check whether recognition may be used at all."""
        pass

    @abstractmethod
    def open_channel(self, language: str, callback: ResultCallback) -> Optional[RecognitionChannel]:
        """Open a streaming channel bound to ``language``.

        Returns:
            The running channel, or None if one could not be allocated
        """
        pass

    def cleanup(self) -> None:
        """Clean up provider resources."""
        pass
