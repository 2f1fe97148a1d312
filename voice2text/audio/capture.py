"""Audio capture module with continuous recording and event publishing."""

import pyaudio
import time
import logging
from threading import Thread, Event
from typing import Optional, Callable
from datetime import datetime
import numpy as np

from ..models.audio import AudioStats
from ..models.events import AudioEvent


logger = logging.getLogger(__name__)


class AudioDeviceError(RuntimeError):
    """The audio input device could not be configured or started."""


class AudioCapture:
    """Continuous audio capture that hands every chunk to a callback."""

    def __init__(
        self,
        callback: Callable[[AudioEvent], None],
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
        input_device_index: Optional[int] = None,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            callback: Receives one AudioEvent per captured chunk
            sample_rate: Audio sample rate (16kHz for streaming recognition)
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
            input_device_index: PyAudio input device, None for the default
        """
        self.audio_event_callback = callback
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format
        self.input_device_index = input_device_index

        # Recording thread management
        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False

        # Statistics tracking
        self.start_time: Optional[datetime] = None
        self.stop_time: Optional[datetime] = None
        self.total_chunks = 0
        self.peak_level = 0.0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream: Optional[pyaudio.Stream] = None

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def open(self) -> None:
        """Open the input stream. Raises AudioDeviceError if the device can't be configured."""
        if self.is_open:
            return
        try:
            self.pyaudio_instance = pyaudio.PyAudio()
            self.stream = self.pyaudio_instance.open(
                format=self.format,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                input_device_index=self.input_device_index,
                frames_per_buffer=self.chunk_size,
                stream_callback=None
            )
        except (OSError, ValueError) as e:
            logger.error(f"Audio input could not be opened: {e}")
            self._release()
            raise AudioDeviceError(f"Audio input could not be opened: {e}") from e
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")

    def start_recording(self) -> None:
        """Start continuous recording in background thread."""
        if self.is_recording:
            logger.warning("Recording already in progress")
            return

        self.open()

        logger.info("Starting audio recording")
        self.stop_event.clear()
        self.start_time = datetime.now()
        self.stop_time = None
        self.total_chunks = 0
        self.peak_level = 0.0

        self.recording_thread = Thread(target=self._record_continuously, daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.is_recording = True
        self.recording_thread.start()

    def stop_recording(self) -> None:
        """Stop recording and clean up resources."""
        if not self.is_recording:
            logger.debug("No recording in progress")
            self._release()
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()

        # Wait for recording thread to finish
        if self.recording_thread and self.recording_thread.is_alive():
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Recording thread did not stop cleanly")

        self.is_recording = False
        self.stop_time = datetime.now()
        logger.info(f"Recording stopped. Total chunks: {self.total_chunks}")

    def __read_audio_chunk(self) -> bytes:
        audio_chunk = self.stream.read(
            self.chunk_size,
            exception_on_overflow=False
        )
        self.total_chunks += 1
        self.peak_level = max(self.peak_level, self._chunk_peak(audio_chunk))
        return audio_chunk

    def __publish_audio_event(self, audio_chunk: bytes) -> None:
        audio_event = AudioEvent(
            chunk_id=f"chunk_{self.total_chunks}",
            audio_data=audio_chunk,
            timestamp=time.time(),
            sequence_number=self.total_chunks,
            sample_rate=self.sample_rate,
            channels=self.channels,
            final=self.stop_event.is_set()
        )
        self.audio_event_callback(audio_event)

    def _record_continuously(self) -> None:
        """Internal method: continuous recording loop in background thread."""
        try:
            while not self.stop_event.is_set():
                audio_chunk = self.__read_audio_chunk()
                self.__publish_audio_event(audio_chunk)
            # Publish final event, so consumers know we are done
            audio_chunk = self.__read_audio_chunk()
            self.__publish_audio_event(audio_chunk)
        except OSError as e:
            logger.error(f"Audio stream read failed: {e}")
        finally:
            self._release()

    def _release(self) -> None:
        if self.stream is not None:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except OSError as e:
                logger.warning(f"Error closing audio stream: {e}")
            self.stream = None
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None

    @staticmethod
    def _chunk_peak(audio_chunk: bytes) -> float:
        if not audio_chunk:
            return 0.0
        samples = np.frombuffer(audio_chunk, dtype=np.int16)
        if samples.size == 0:
            return 0.0
        return float(np.abs(samples.astype(np.int32)).max()) / 32768.0

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.start_time:
            duration = ((self.stop_time or datetime.now()) - self.start_time).total_seconds()

        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
            peak_level=self.peak_level,
        )

    def __del__(self):
        """Ensure resources are cleaned up on deletion."""
        if self.is_recording:
            self.stop_recording()
