"""Unit tests for the terminal screen."""

import io
import pytest
from unittest.mock import Mock, patch
from rich.console import Console

from voice2text.models.ui import STOP_LABEL
from voice2text.services import SessionState
from voice2text.ui import ClipboardError, VoiceToTextScreen


@pytest.fixture
def screen(fake_app):
    console = Console(file=io.StringIO(), width=100)
    screen = VoiceToTextScreen(fake_app, console=console, clipboard=Mock())
    screen.input_handler = Mock()
    return screen


def press(screen, key):
    result = screen.on_key(key)
    screen.app.dispatcher.run_pending()
    return result


@pytest.mark.unit
class TestKeyHandling:
    """Keys are dispatched to the main context before acting."""

    def test_key_action_waits_for_dispatcher(self, screen):
        screen.on_key(" ")

        assert screen.app.session_controller.state is SessionState.IDLE
        screen.app.dispatcher.run_pending()
        assert screen.app.session_controller.is_capturing is True

    @pytest.mark.parametrize("key", [" ", "1", "\r"])
    def test_toggle_keys(self, screen, key):
        assert press(screen, key) is True
        assert screen.app.display.start_label == STOP_LABEL

    def test_toggle_ignored_when_disabled(self, screen):
        screen.app.display.start_enabled = False

        press(screen, " ")

        assert screen.app.session_controller.state is SessionState.IDLE

    def test_language_key_cycles(self, screen):
        press(screen, "l")
        assert screen.app.language_selector.current.key == "hindi"
        assert screen.app.display.title == "हिंदी मे बोलो"

    def test_speak_key(self, screen):
        press(screen, "s")
        assert screen.app.synthesis_provider.spoken == [screen.app.display.text]

    def test_copy_key(self, screen):
        press(screen, "c")

        screen.clipboard.copy.assert_called_once_with(screen.app.display.text)
        assert screen.app.display.copied is True

    def test_copy_failure_alerts(self, screen):
        screen.clipboard.copy.side_effect = ClipboardError("no display")

        press(screen, "c")

        assert screen.app.display.copied is False
        assert screen.app.display.notices[-1].title == "Copy Failed"

    def test_unknown_key_ignored(self, screen):
        assert screen.on_key("z") is True
        assert screen.app.dispatcher.run_pending() == 0

    @pytest.mark.parametrize("key", ["q", "\x03"])
    def test_quit_keys(self, screen, key):
        screen.running = True
        assert press(screen, key) is False
        assert screen.running is False

    def test_scan_key_prompts_and_scans(self, screen, tmp_path):
        with patch('voice2text.ui.screen.Prompt.ask', return_value=""):
            press(screen, "o")

        screen.input_handler.stop.assert_called_once()
        screen.input_handler.start.assert_called_once()
        assert len(screen.app.scan_log) == 0

    def test_scan_key_with_quoted_paths(self, screen):
        screen.app.scan_flow.scan = Mock()
        with patch('voice2text.ui.screen.Prompt.ask', return_value='"my scans/p1.png" p2.png'):
            press(screen, "o")

        screen.app.scan_flow.scan.assert_called_once_with(["my scans/p1.png", "p2.png"])


@pytest.mark.unit
class TestRendering:
    def test_show_status(self, screen):
        screen.app.display.show_text("transcribed words")
        screen.app.notifier.alert("Error", "audio engine couldn't start because of an error")

        screen.show_status()

        output = screen.console.file.getvalue()
        assert "Speak in English" in output
        assert "transcribed words" in output
        assert "audio engine couldn't start" in output
        assert "Start Recording" in output

    def test_recording_status(self, screen):
        press(screen, " ")
        screen.show_status()
        assert "RECORDING" in screen.console.file.getvalue()

    def test_recording_status_shows_level_meter(self, screen, session_env):
        press(screen, " ")
        capture = session_env.captures[-1]
        capture.feed(b"\x00\x00" * 4)
        capture.feed(b"\x00\x00" * 4)
        capture.peak_level = 0.5

        screen.show_status()

        output = screen.console.file.getvalue()
        assert "Duration: 1.0s   Chunks: 2" in output
        assert "█" * 10 + " " * 10 in output
        assert "0.500" in output

    def test_idle_status_has_no_level_meter(self, screen):
        screen.show_status()
        assert "Chunks:" not in screen.console.file.getvalue()

    def test_run_loop_exits_on_quit(self, screen):
        handler = Mock()
        screen.app.dispatcher.dispatch(screen.quit)
        with patch('voice2text.ui.screen.create_input_handler', return_value=handler):
            screen.run()

        handler.start.assert_called_once()
        handler.stop.assert_called_once()
        screen.clipboard.close.assert_called_once()
