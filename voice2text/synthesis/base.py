"""Abstract base class for speech synthesis providers."""

from abc import ABC, abstractmethod


class AbstractSynthesisProvider(ABC):
    """Speaks text aloud, one utterance at a time."""

    @property
    @abstractmethod
    def is_speaking(self) -> bool:
        pass

    @abstractmethod
    def speak(self, text: str) -> None:
        """Start speaking ``text`` at the provider's default rate. Returns immediately."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop the current utterance immediately."""
        pass

    def cleanup(self) -> None:
        pass
