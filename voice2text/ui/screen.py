"""Single-screen terminal interface for Voice2Text."""

import time
import shlex
import logging
from typing import Optional, TYPE_CHECKING

from pubsub import pub
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from ..models.ui import Notice
from ..services import NOTICE_TOPIC
from .clipboard import ClipboardError, TkClipboard
from .keyboard_input import create_input_handler

if TYPE_CHECKING:
    from ..main import Application

logger = logging.getLogger(__name__)

KEY_ACTIONS = {
    " ": "toggle_recording",
    "1": "toggle_recording",
    "\r": "toggle_recording",
    "l": "choose_language",
    "s": "speak",
    "c": "copy_text",
    "o": "scan_document",
}

# Redraw interval for the level meter while capturing.
STATS_REFRESH_SECONDS = 1.0


class VoiceToTextScreen:
    """Renders the display surface and turns key presses into actions.

    Key presses arrive on the input thread and are dispatched to the main
    context; the run() loop is the main context.
    """

    def __init__(self, app: "Application", console: Optional[Console] = None,
                 clipboard: Optional[TkClipboard] = None):
        self.app = app
        self.console = console or Console()
        self.clipboard = clipboard or TkClipboard()
        self.running = False
        self.input_handler = None
        self._dirty = True
        self._was_speaking = False
        self._last_draw = 0.0
        pub.subscribe(self._on_notice, NOTICE_TOPIC)

    def run(self) -> None:
        """Main loop: drain dispatched work and redraw when something changed."""
        self.running = True
        self.input_handler = create_input_handler(self.on_key)
        self.input_handler.start()
        try:
            while self.running:
                if self.app.dispatcher.run_pending(timeout=0.1):
                    self._dirty = True
                speaking = self.app.synthesis_provider.is_speaking
                if speaking != self._was_speaking:
                    self._was_speaking = speaking
                    self._dirty = True
                if (self.app.session_controller.is_capturing
                        and time.time() - self._last_draw >= STATS_REFRESH_SECONDS):
                    self._dirty = True
                if self._dirty:
                    self.show_status()
                    self._last_draw = time.time()
                    self._dirty = False
        finally:
            self.input_handler.stop()
            self.clipboard.close()
            pub.unsubscribe(self._on_notice, NOTICE_TOPIC)

    def on_key(self, key: str) -> bool:
        """Input-thread callback. Returns False to end input."""
        if key in ("q", "\x03"):
            self.app.dispatcher.dispatch(self.quit)
            return False
        action = KEY_ACTIONS.get(key)
        if action is None:
            return True
        self.app.dispatcher.dispatch(getattr(self, action))
        return True

    def quit(self) -> None:
        self.running = False

    def toggle_recording(self) -> None:
        if not self.app.display.start_enabled:
            logger.info("Start control disabled, ignoring")
            return
        self.app.session_controller.toggle()

    def choose_language(self) -> None:
        option = self.app.language_selector.cycle()
        logger.info(f"Language switched to {option.name}")

    def speak(self) -> None:
        self.app.speech_trigger.speak()

    def copy_text(self) -> None:
        try:
            self.clipboard.copy(self.app.display.text)
        except ClipboardError as e:
            logger.error(f"{e}")
            self.app.notifier.alert("Copy Failed", str(e))
            return
        self.app.display.copied = True

    def scan_document(self) -> None:
        # The prompt needs stdin, so key reading pauses meanwhile.
        self.input_handler.stop()
        try:
            answer = Prompt.ask("📷 Page image paths or a folder (empty to cancel)",
                                console=self.console, default="", show_default=False)
        finally:
            self.input_handler.start()
        self.app.scan_flow.scan(shlex.split(answer))

    def _on_notice(self, event: Notice) -> None:
        self._dirty = True

    def show_status(self) -> None:
        """Draw the whole screen."""
        display = self.app.display
        controller = self.app.session_controller
        self.console.clear()

        self.console.print(f"🎙️  Voice2Text - {display.title}", style="bold blue")
        self.console.print("=" * 50)

        if controller.is_capturing:
            self.console.print(f"🔴 RECORDING ({controller.state.value})", style="bold red")
            stats = controller.capture_stats()
            if stats is not None:
                peak_bar = "█" * int(stats.peak_level * 20)
                self.console.print(f"Duration: {stats.duration_seconds:.1f}s   Chunks: {stats.total_chunks}")
                self.console.print(f"Audio: [{peak_bar:<20}] {stats.peak_level:.3f}")
        elif controller.is_active:
            self.console.print("⏳ FINISHING", style="bold yellow")
        else:
            self.console.print("⏹️  STOPPED", style="bold yellow")

        if not controller.authorized:
            self.console.print("❌ Speech recognition not authorized", style="red")
        if self.app.synthesis_provider.is_speaking:
            self.console.print("🔊 Speaking", style="cyan")

        self.console.print(f"Language: {display.language_label}   Scans: {len(self.app.scan_log)}")
        self.console.print(Panel(Text(display.text or " "), title="Text",
                                 subtitle="✅ copied" if display.copied else None))

        for notice in list(display.notices)[-3:]:
            style = "bold red" if notice.level == "alert" else "yellow"
            self.console.print(f"{notice.title}: {notice.message}", style=style)

        start_style = "bold green" if display.start_enabled else "dim"
        self.console.print("\n" + "=" * 50)
        self.console.print("Commands:")
        self.console.print(f"  [{start_style}]space[/{start_style}] - {display.start_label}")
        self.console.print("  [bold blue]l[/bold blue] - Change language")
        self.console.print("  [bold cyan]s[/bold cyan] - Speak / stop speaking")
        self.console.print("  [bold magenta]c[/bold magenta] - Copy text")
        self.console.print("  [bold yellow]o[/bold yellow] - Scan document")
        self.console.print("  [bold red]q[/bold red] - Quit")
        self.console.print("=" * 50)
