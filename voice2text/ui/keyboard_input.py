"""Cross-platform keyboard input handling for the terminal UI."""

import sys
import threading
import time
from typing import Optional, Callable
import logging

logger = logging.getLogger(__name__)


class KeyboardInputHandler:
    """Reads single key presses on a background thread."""

    def __init__(self, callback: Callable[[str], bool]):
        """Initialize keyboard handler.

        Args:
            callback: Function that takes a key and returns True to continue, False to quit
        """
        self.callback = callback
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the keyboard input handler."""
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._input_loop, daemon=True)
        self.thread.name = "KeyboardInputThread"
        self.thread.start()
        logger.info("Keyboard input handler started")

    def stop(self) -> None:
        """Stop the keyboard input handler."""
        self.running = False
        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout=1.0)
        logger.info("Keyboard input handler stopped")

    def _input_loop(self) -> None:
        """Main input handling loop."""
        logger.info("Starting keyboard input loop")
        while self.running:
            key = self._get_key()
            if key:
                logger.debug(f"Key detected: {key!r}")
                if not self.callback(key):
                    logger.info("Callback returned False, breaking input loop")
                    self.running = False
                    break
            # Small delay to prevent busy waiting
            time.sleep(0.05)
        logger.info("Keyboard input loop ended")

    def _get_key(self) -> Optional[str]:
        """Get a single keypress in a cross-platform way."""
        if sys.platform == "win32":
            return self._get_key_windows()
        return self._get_key_unix()

    def _get_key_windows(self) -> Optional[str]:
        """Get key on Windows."""
        import msvcrt
        if msvcrt.kbhit():
            key = msvcrt.getch().decode('utf-8', errors='ignore')
            return key.lower()
        return None

    def _get_key_unix(self) -> Optional[str]:
        """Get key on Unix/Linux/macOS."""
        import select
        import tty
        import termios

        if select.select([sys.stdin], [], [], 0.1)[0]:
            # Raw mode for the single read only
            old_settings = termios.tcgetattr(sys.stdin)
            try:
                tty.setraw(sys.stdin.fileno())
                key = sys.stdin.read(1)
                return key.lower()
            finally:
                termios.tcsetattr(sys.stdin, termios.TCSADRAIN, old_settings)
        return None


class SimpleInputHandler:
    """Fallback line-based handler for when stdin is not a terminal."""

    def __init__(self, callback: Callable[[str], bool]):
        """Initialize simple handler.

        Args:
            callback: Function that takes a key and returns True to continue, False to quit
        """
        self.callback = callback
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the simple input handler."""
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._input_loop, daemon=True)
        self.thread.name = "SimpleInputThread"
        self.thread.start()
        logger.info("Simple input handler started")

    def stop(self) -> None:
        """Stop the simple input handler.

        A pending input() call can't be interrupted; the thread is a daemon
        and exits with the process.
        """
        self.running = False
        logger.info("Simple input handler stopped")

    def _input_loop(self) -> None:
        """Simple input loop using input()."""
        while self.running:
            try:
                user_input = input("> ").strip().lower()
            except EOFError:
                self.callback("q")
                break

            if not self.running:
                break
            key = user_input[0] if user_input else " "  # empty line toggles recording
            if not self.callback(key):
                self.running = False
                break


def create_input_handler(callback: Callable[[str], bool]) -> object:
    """Create the best available input handler for the current terminal.

    Args:
        callback: Function that takes a key and returns True to continue, False to quit

    Returns:
        An input handler instance
    """
    if sys.stdin.isatty():
        return KeyboardInputHandler(callback)
    logger.warning("stdin is not a terminal, using line-based input")
    return SimpleInputHandler(callback)
