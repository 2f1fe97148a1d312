"""Pytest configuration and fixtures for Voice2Text tests."""

import pytest
import time
import logging
from types import SimpleNamespace
from unittest.mock import Mock, patch
import numpy as np
from pubsub import pub

from voice2text.audio import AudioDeviceError
from voice2text.models.audio import AudioStats
from voice2text.models.events import AudioEvent
from voice2text.models.transcription import AuthorizationStatus, RecognitionResult
from voice2text.models.ui import DisplayState
from voice2text.recognition.base import AbstractRecognitionProvider, RecognitionChannel
from voice2text.services import MainThreadDispatcher, Notifier, RecordingSessionController
from voice2text.synthesis.base import AbstractSynthesisProvider


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without hardware")
    config.addinivalue_line("markers", "integration: several components wired together")
    config.addinivalue_line("markers", "hardware: needs a real microphone")
    config.addinivalue_line("markers", "slow: runs real threads for a while")


@pytest.fixture(autouse=True)
def reset_pubsub():
    """Drop listeners left over from a previous test."""
    pub.unsubAll()
    yield
    pub.unsubAll()


class FakeChannel(RecognitionChannel):
    """Recognition channel driven by the test."""

    def __init__(self, language, callback, final_on_end=None):
        self.language = language
        self.callback = callback
        self.final_on_end = final_on_end
        self.chunks = []
        self.ended = False
        self.cancelled = False
        self.finished = False

    @property
    def is_open(self):
        return not (self.cancelled or self.finished)

    def append(self, audio_chunk):
        if not (self.ended or self.cancelled):
            self.chunks.append(audio_chunk)

    def end_audio(self):
        self.ended = True
        if self.final_on_end is not None:
            self.emit(self.final_on_end, is_final=True)

    def cancel(self):
        self.cancelled = True

    def emit(self, text, is_final=False):
        if is_final:
            self.finished = True
        self.callback(RecognitionResult(text=text, is_final=is_final, language=self.language), None)

    def fail(self, error):
        self.finished = True
        self.callback(None, error)


class FakeRecognitionProvider(AbstractRecognitionProvider):
    """Provider that hands out FakeChannels."""

    def __init__(self, status=AuthorizationStatus.AUTHORIZED, allocate=True, final_on_end=None):
        self.status = status
        self.allocate = allocate
        self.final_on_end = final_on_end
        self.channels = []
        self.cleaned_up = False

    def request_authorization(self):
        return self.status

    def open_channel(self, language, callback):
        if not self.allocate:
            return None
        channel = FakeChannel(language, callback, final_on_end=self.final_on_end)
        self.channels.append(channel)
        return channel

    def cleanup(self):
        self.cleaned_up = True

    @property
    def open_channels(self):
        return [c for c in self.channels if c.is_open]


class FakeCapture:
    """Stands in for AudioCapture; the test pushes frames with feed()."""

    def __init__(self, callback, fail_open=False):
        self.callback = callback
        self.fail_open = fail_open
        self.opened = False
        self.is_recording = False
        self.sequence = 0
        self.peak_level = 0.0

    def open(self):
        if self.fail_open:
            raise AudioDeviceError("no input device")
        self.opened = True

    def start_recording(self):
        self.open()
        self.is_recording = True

    def stop_recording(self):
        self.is_recording = False
        self.opened = False

    def get_recording_stats(self):
        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=0.5 * self.sequence,
            sample_rate=16000,
            chunk_size=1024,
            total_chunks=self.sequence,
            peak_level=self.peak_level,
        )

    def feed(self, data, final=False):
        self.sequence += 1
        self.callback(AudioEvent(
            chunk_id=f"chunk_{self.sequence}",
            audio_data=data,
            timestamp=time.time(),
            sequence_number=self.sequence,
            final=final,
        ))


class FakeSynthesisProvider(AbstractSynthesisProvider):
    def __init__(self):
        self.spoken = []
        self.stop_calls = 0
        self._speaking = False

    @property
    def is_speaking(self):
        return self._speaking

    def speak(self, text):
        self.spoken.append(text)
        self._speaking = True

    def stop(self):
        self.stop_calls += 1
        self._speaking = False


@pytest.fixture
def fake_provider():
    return FakeRecognitionProvider()


@pytest.fixture
def session_env(fake_provider):
    """A RecordingSessionController wired to fakes.

    Set ``env.fail_open = True`` to make the next capture fail to open.
    """
    env = SimpleNamespace(provider=fake_provider, captures=[], fail_open=False)

    def capture_factory(callback):
        capture = FakeCapture(callback, fail_open=env.fail_open)
        env.captures.append(capture)
        return capture

    env.display = DisplayState()
    env.dispatcher = MainThreadDispatcher()
    env.notifier = Notifier(env.display)
    env.controller = RecordingSessionController(
        provider=fake_provider,
        capture_factory=capture_factory,
        dispatcher=env.dispatcher,
        display=env.display,
        notifier=env.notifier,
    )
    return env


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate  # ~0.064 seconds
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    # Convert to 16-bit integers
    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None
        mock_pyaudio_instance.get_sample_size.return_value = 2

        # Configure mock PyAudio class
        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }


@pytest.fixture
def fake_synthesis():
    return FakeSynthesisProvider()


@pytest.fixture
def fake_app(session_env, fake_synthesis):
    """Everything Application.init() builds, wired to fakes."""
    from voice2text.services import LanguageSelector, ScanLog, ScanToTextFlow, SpeechTrigger
    from voice2text.scanning import ImageFileScanner

    session_env.controller.check_authorization()
    app = SimpleNamespace(
        dispatcher=session_env.dispatcher,
        display=session_env.display,
        notifier=session_env.notifier,
        session_controller=session_env.controller,
        recognition_provider=session_env.provider,
        synthesis_provider=fake_synthesis,
        scan_log=ScanLog(),
    )
    app.language_selector = LanguageSelector(app.session_controller, app.display)
    app.speech_trigger = SpeechTrigger(fake_synthesis, app.display)
    app.ocr = Mock()
    app.ocr.recognize_text.return_value = "Scanned words"
    app.scan_flow = ScanToTextFlow(ImageFileScanner(), app.ocr, app.scan_log, app.display, app.notifier)
    return app
