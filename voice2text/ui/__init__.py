"""Terminal user interface for Voice2Text."""

from .screen import VoiceToTextScreen
from .clipboard import TkClipboard, ClipboardError
from .keyboard_input import KeyboardInputHandler, SimpleInputHandler, create_input_handler

__all__ = [
    "VoiceToTextScreen",
    "TkClipboard",
    "ClipboardError",
    "KeyboardInputHandler",
    "SimpleInputHandler",
    "create_input_handler",
]
