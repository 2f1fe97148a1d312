"""Unit tests for AudioCapture class."""

import pytest
import time
from unittest.mock import Mock, patch
import numpy as np
from voice2text.audio.capture import AudioCapture, AudioDeviceError
from voice2text.models.audio import AudioStats


@pytest.mark.unit
class TestAudioCapture:
    """Test cases for AudioCapture class."""

    def test_initialization(self):
        """Test AudioCapture initialization with default parameters."""
        capture = AudioCapture(callback=Mock())

        assert capture.sample_rate == 16000
        assert capture.chunk_size == 1024
        assert capture.channels == 1
        assert capture.is_recording is False
        assert capture.is_open is False
        assert capture.total_chunks == 0
        assert capture.peak_level == 0.0

    def test_initialization_custom_parameters(self):
        """Test AudioCapture initialization with custom parameters."""
        capture = AudioCapture(
            callback=Mock(),
            sample_rate=44100,
            chunk_size=2048,
            channels=2,
            input_device_index=3
        )

        assert capture.sample_rate == 44100
        assert capture.chunk_size == 2048
        assert capture.channels == 2
        assert capture.input_device_index == 3

    def test_open(self, mock_pyaudio):
        """Opening configures the input stream without starting the thread."""
        capture = AudioCapture(callback=Mock(), input_device_index=2)

        capture.open()

        assert capture.is_open is True
        assert capture.is_recording is False
        kwargs = mock_pyaudio['instance'].open.call_args.kwargs
        assert kwargs['input'] is True
        assert kwargs['rate'] == 16000
        assert kwargs['input_device_index'] == 2

    def test_open_failure_raises_device_error(self, mock_pyaudio):
        """A device that can't be configured raises AudioDeviceError and releases PyAudio."""
        mock_pyaudio['instance'].open.side_effect = OSError("Invalid input device")
        capture = AudioCapture(callback=Mock())

        with pytest.raises(AudioDeviceError):
            capture.open()

        assert capture.is_open is False
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_start_recording(self, mock_pyaudio):
        """Test starting audio recording."""
        capture = AudioCapture(callback=Mock())

        # Mock the recording method to prevent actual recording
        with patch.object(capture, '_record_continuously') as mock_record:
            capture.start_recording()

            assert capture.is_recording is True
            assert capture.start_time is not None
            assert capture.recording_thread is not None
            assert capture.recording_thread.daemon is True
            capture.recording_thread.join(timeout=1.0)
            mock_record.assert_called_once()

    def test_start_recording_already_recording(self, mock_pyaudio):
        """Test starting recording when already recording."""
        capture = AudioCapture(callback=Mock())
        capture.is_recording = True

        with patch.object(capture, '_record_continuously') as mock_record:
            capture.start_recording()

            # Should not start new recording
            mock_record.assert_not_called()
        capture.is_recording = False

    def test_start_recording_open_failure(self, mock_pyaudio):
        """start_recording propagates the device error and leaves capture idle."""
        mock_pyaudio['instance'].open.side_effect = OSError("busy")
        capture = AudioCapture(callback=Mock())

        with pytest.raises(AudioDeviceError):
            capture.start_recording()

        assert capture.is_recording is False
        assert capture.recording_thread is None

    def test_stop_recording(self, mock_pyaudio):
        """Test stopping audio recording."""
        capture = AudioCapture(callback=Mock())

        # Start recording first
        with patch.object(capture, '_record_continuously'):
            capture.start_recording()

            # Stop recording
            capture.stop_recording()

            assert capture.is_recording is False
            assert capture.stop_event.is_set()

    def test_stop_recording_not_recording(self, mock_pyaudio):
        """Stopping an opened but idle capture closes the stream."""
        capture = AudioCapture(callback=Mock())
        capture.open()

        capture.stop_recording()

        assert capture.is_recording is False
        assert capture.is_open is False
        mock_pyaudio['stream'].close.assert_called_once()

    def test_get_recording_stats(self, mock_pyaudio):
        """Test getting recording statistics."""
        capture = AudioCapture(callback=Mock())

        stats = capture.get_recording_stats()

        assert isinstance(stats, AudioStats)
        assert stats.is_recording is False
        assert stats.duration_seconds >= 0
        assert stats.sample_rate == 16000
        assert stats.chunk_size == 1024
        assert stats.total_chunks == 0
        assert stats.peak_level == 0.0

    def test_get_recording_stats_while_recording(self, mock_pyaudio):
        """Test getting recording statistics while recording."""
        capture = AudioCapture(callback=Mock())

        with patch.object(capture, '_record_continuously'):
            capture.start_recording()

            # Wait a bit to ensure some time passes
            time.sleep(0.1)

            stats = capture.get_recording_stats()
            assert stats.is_recording is True
            assert stats.duration_seconds > 0

            capture.stop_recording()

    @pytest.mark.slow
    def test_record_continuously_publishes_events(self, mock_pyaudio):
        """Every chunk reaches the callback in order, ending with a final event."""
        events = []
        capture = AudioCapture(callback=events.append, chunk_size=512)

        test_chunk = b'\x00' * 1024
        mock_pyaudio['stream'].read.return_value = test_chunk

        capture.start_recording()
        time.sleep(0.2)
        capture.stop_recording()

        assert capture.total_chunks > 0
        assert len(events) == capture.total_chunks
        assert [e.sequence_number for e in events] == list(range(1, len(events) + 1))
        assert events[-1].final is True
        assert all(e.audio_data == test_chunk for e in events)
        # The thread releases the stream on its way out
        assert capture.is_open is False
        mock_pyaudio['instance'].terminate.assert_called()

    def test_read_error_ends_recording_thread(self, mock_pyaudio):
        """An OSError from the stream stops the loop and releases the device."""
        mock_pyaudio['stream'].read.side_effect = OSError("Input overflowed")
        capture = AudioCapture(callback=Mock())

        capture.start_recording()
        capture.recording_thread.join(timeout=1.0)

        assert not capture.recording_thread.is_alive()
        assert capture.is_open is False
        capture.stop_recording()
        assert capture.is_recording is False

    def test_peak_level_calculation(self, mock_pyaudio):
        """Test peak level calculation during recording."""
        capture = AudioCapture(callback=Mock())

        # Create audio data with known peak
        samples = np.array([0, 16383, 0, -16383, 0], dtype=np.int16)  # 50% peak
        test_chunk = samples.tobytes()

        # Mock stream to return our test data
        mock_pyaudio['stream'].read.return_value = test_chunk

        # Start and quickly stop recording
        capture.start_recording()
        time.sleep(0.1)
        capture.stop_recording()

        # Peak should be approximately 0.5 (16383 / 32768)
        assert capture.peak_level > 0.4
        assert capture.peak_level < 0.6

    def test_chunk_peak_of_empty_chunk(self):
        assert AudioCapture._chunk_peak(b'') == 0.0

    def test_chunk_peak_full_scale(self):
        samples = np.array([-32768, 0], dtype=np.int16)
        assert AudioCapture._chunk_peak(samples.tobytes()) == 1.0

    def test_destructor_cleanup(self, mock_pyaudio):
        """Test that destructor properly cleans up resources."""
        capture = AudioCapture(callback=Mock())

        # Test that destructor calls stop_recording when is_recording is True
        with patch.object(AudioCapture, 'stop_recording') as mock_stop:
            capture.is_recording = True

            # Trigger destructor
            capture.__del__()

            # Should call stop_recording
            mock_stop.assert_called_once()
        capture.is_recording = False
