"""Speech synthesis for Voice2Text."""

from .base import AbstractSynthesisProvider
from .pyttsx3_backend import Pyttsx3SynthesisProvider

__all__ = [
    "AbstractSynthesisProvider",
    "Pyttsx3SynthesisProvider",
]
