"""System clipboard access through Tk."""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ClipboardError(RuntimeError):
    """The system clipboard is not reachable (e.g. no display)."""


class TkClipboard:
    """Owns a hidden Tk root so copied text stays available while the app runs.

    Must only be used from the main context. tkinter is imported on first use
    so the terminal UI still runs on interpreters built without Tk.
    """

    def __init__(self):
        self._root: Optional[Any] = None

    def copy(self, text: str) -> None:
        root = self._ensure_root()
        import tkinter as tk
        try:
            root.clipboard_clear()
            root.clipboard_append(text)
            root.update()
        except tk.TclError as e:
            raise ClipboardError(f"Could not write to the clipboard: {e}") from e
        logger.info(f"Copied {len(text)} characters to the clipboard")

    def close(self) -> None:
        if self._root is not None:
            self._root.destroy()
            self._root = None

    def _ensure_root(self) -> Any:
        if self._root is not None:
            return self._root
        try:
            import tkinter as tk
        except ImportError as e:
            raise ClipboardError(f"Tk is not available for the clipboard: {e}") from e
        try:
            self._root = tk.Tk()
        except tk.TclError as e:
            raise ClipboardError(f"No display available for the clipboard: {e}") from e
        self._root.withdraw()
        return self._root
