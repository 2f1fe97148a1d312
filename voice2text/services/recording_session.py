"""Recording session lifecycle: audio capture feeding one streaming recognition channel."""

import uuid
import logging
from enum import Enum
from functools import partial
from typing import Callable, Optional

from pubsub import pub

from ..audio import AudioCapture, AudioDeviceError, AudioPublisher, AUDIO_TOPIC
from ..models.audio import AudioStats
from ..models.events import AudioEvent, SessionEvent, TranscriptEvent
from ..models.transcription import AuthorizationStatus, RecognitionResult
from ..models.ui import DisplayState, START_LABEL, STOP_LABEL
from ..recognition import AbstractRecognitionProvider, RecognitionChannel, SessionPublisher
from .dispatcher import MainThreadDispatcher
from .notifications import Notifier

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Say something, I'm listening!"

CaptureFactory = Callable[[Callable[[AudioEvent], None]], AudioCapture]


class ChannelAllocationError(RuntimeError):
    """The provider could not allocate a recognition channel although access was granted."""


class SessionState(Enum):
    """Idle, or one of the active sub-states."""
    IDLE = "idle"
    LISTENING = "listening"    # active, no partial transcript yet
    STREAMING = "streaming"    # active, partial transcripts arriving
    STOPPING = "stopping"      # end-of-audio sent, awaiting the trailing final


class RecordingSession:
    """Audio capture, recognition channel and audio tap for one start/stop cycle."""

    def __init__(self, language: str, audio_topic: str = AUDIO_TOPIC):
        self.session_id = uuid.uuid4().hex[:12]
        self.language = language
        self.audio_topic = audio_topic
        self.channel: Optional[RecognitionChannel] = None
        self.capture: Optional[AudioCapture] = None
        self.capture_active = False
        self.stop_requested = False
        self.partial_count = 0
        self.frames_forwarded = 0
        self.audio_complete = False
        self._tapped = False

    @property
    def state(self) -> SessionState:
        if self.stop_requested:
            return SessionState.STOPPING
        if self.partial_count:
            return SessionState.STREAMING
        return SessionState.LISTENING

    def install_tap(self) -> None:
        if not self._tapped:
            pub.subscribe(self.on_audio_frame, self.audio_topic)
            self._tapped = True

    def remove_tap(self) -> None:
        if self._tapped:
            pub.unsubscribe(self.on_audio_frame, self.audio_topic)
            self._tapped = False

    def on_audio_frame(self, event: AudioEvent) -> None:
        """Audio tap: runs on the capture thread for every chunk."""
        if self.channel is None:
            return
        self.channel.append(event.audio_data)
        self.frames_forwarded += 1
        if event.final:
            self.audio_complete = True
            logger.debug(f"Session {self.session_id}: capture ended after {self.frames_forwarded} frames")


class RecordingSessionController:
    """Starts and stops recording sessions and shows their transcripts.

    start(), stop() and every result delivery run on the main context, so the
    single current-session reference needs no locking.
    """

    def __init__(self,
                 provider: AbstractRecognitionProvider,
                 capture_factory: CaptureFactory,
                 dispatcher: MainThreadDispatcher,
                 display: DisplayState,
                 notifier: Notifier,
                 publisher: Optional[SessionPublisher] = None,
                 language: str = "en-US",
                 listening_prompt: str = DEFAULT_PROMPT,
                 audio_topic: str = AUDIO_TOPIC):
        self.provider = provider
        self.capture_factory = capture_factory
        self.dispatcher = dispatcher
        self.display = display
        self.notifier = notifier
        self.publisher = publisher or SessionPublisher()
        self.audio_publisher = AudioPublisher(audio_topic)
        self.audio_topic = audio_topic

        self.language = language
        self.listening_prompt = listening_prompt
        self.authorized = False
        self.available = True
        self._session: Optional[RecordingSession] = None
        provider.set_availability_listener(self._on_provider_availability)

    @property
    def session(self) -> Optional[RecordingSession]:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.IDLE
        return self._session.state

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def is_capturing(self) -> bool:
        return self._session is not None and self._session.capture_active

    def capture_stats(self) -> Optional[AudioStats]:
        """Level meter and counters of the current session's capture, None when idle."""
        session = self._session
        if session is None or session.capture is None:
            return None
        return session.capture.get_recording_stats()

    def check_authorization(self) -> AuthorizationStatus:
        """Ask the provider for access once at launch and set the start control."""
        status = self.provider.request_authorization()
        self.authorized = status is AuthorizationStatus.AUTHORIZED
        if status is AuthorizationStatus.DENIED:
            logger.warning("User denied access to speech recognition")
        elif status is AuthorizationStatus.RESTRICTED:
            logger.warning("Speech recognition restricted on this device")
        elif status is AuthorizationStatus.NOT_DETERMINED:
            logger.warning("Speech recognition not yet authorized")
        self._refresh_start_control()
        return status

    def on_availability_changed(self, available: bool) -> None:
        """Provider availability notification."""
        logger.info(f"Recognition availability changed: {available}")
        self.available = available
        if not self.is_active:
            self._refresh_start_control()

    def _on_provider_availability(self, available: bool) -> None:
        """Provider listener, may run on any thread."""
        self.dispatcher.dispatch(self.on_availability_changed, available)

    def set_language(self, language: str, listening_prompt: Optional[str] = None) -> None:
        """Locale for the next start(). A running session keeps its own."""
        self.language = language
        if listening_prompt is not None:
            self.listening_prompt = listening_prompt
        logger.info(f"Recognition language set to {language}")

    def toggle(self) -> bool:
        """The start/stop button."""
        if self.is_capturing:
            return self.stop()
        return self.start()

    def start(self) -> bool:
        """Begin a new session. Results arrive later through the dispatcher.

        Returns:
            True if capture started. Raises ChannelAllocationError if the provider
            cannot open a channel.
        """
        if self.is_capturing:
            logger.warning("Recording already in progress")
            return False
        if not self.authorized:
            logger.warning("Speech recognition not authorized, ignoring start")
            return False

        self._cancel_lingering_session()

        session = RecordingSession(self.language, self.audio_topic)
        capture = self.capture_factory(self.audio_publisher.publish_audio_event)
        try:
            capture.open()
        except AudioDeviceError as e:
            logger.error(f"audioSession properties weren't set because of an error: {e}")
            self.notifier.alert("Error", "audio session properties weren't set because of an error")
            return False

        channel = self.provider.open_channel(session.language,
                                             partial(self._on_channel_result, session.session_id))
        if channel is None:
            capture.stop_recording()
            raise ChannelAllocationError("Unable to create a recognition channel")

        session.channel = channel
        session.capture = capture
        session.install_tap()
        try:
            capture.start_recording()
        except AudioDeviceError as e:
            logger.error(f"Audio capture couldn't start because of an error: {e}")
            session.remove_tap()
            channel.cancel()
            self.notifier.alert("Error", "audio engine couldn't start because of an error")
            return False

        session.capture_active = True
        self._session = session
        logger.info(f"Started session {session.session_id} ({session.language})")

        self.display.show_text(self.listening_prompt)
        self.display.start_label = STOP_LABEL
        self.display.start_enabled = True
        self.publisher.publish_lifecycle(SessionEvent(session_id=session.session_id,
                                                      event_type="started",
                                                      metadata={"language": session.language}))
        return True

    def stop(self) -> bool:
        """Stop capture and let the channel flush its final transcript."""
        session = self._session
        if session is None or not session.capture_active:
            logger.warning("No recording in progress")
            return False

        logger.info(f"Stopping session {session.session_id}")
        session.capture.stop_recording()
        stats = session.capture.get_recording_stats()
        logger.info(f"Captured {stats.total_chunks} chunks in {stats.duration_seconds:.1f}s, "
                    f"peak level {stats.peak_level:.2f}")
        session.capture_active = False
        session.remove_tap()
        session.stop_requested = True
        session.channel.end_audio()

        # Re-enabled once the trailing final (or an error) arrives.
        self.display.start_enabled = False
        self.display.start_label = START_LABEL
        self.publisher.publish_lifecycle(SessionEvent(session_id=session.session_id, event_type="stopping"))
        return True

    def shutdown(self) -> None:
        """Release everything on application exit."""
        session = self._session
        if session is not None:
            if session.capture_active:
                session.capture.stop_recording()
                session.capture_active = False
            session.remove_tap()
            session.channel.cancel()
            self._session = None
        self.provider.cleanup()

    def _on_channel_result(self,
                           session_id: str,
                           result: Optional[RecognitionResult],
                           error: Optional[Exception]) -> None:
        """Channel callback, runs on the provider's thread."""
        self.dispatcher.dispatch(self._deliver, session_id, result, error)

    def _deliver(self,
                 session_id: str,
                 result: Optional[RecognitionResult],
                 error: Optional[Exception]) -> None:
        session = self._session
        if session is None or session.session_id != session_id:
            logger.debug(f"Dropping result for finished session {session_id}")
            return

        if result is not None:
            self.display.show_text(result.text)
            if not result.is_final:
                session.partial_count += 1
            self.publisher.publish_transcript(TranscriptEvent(session_id=session_id,
                                                              text=result.text,
                                                              is_final=result.is_final,
                                                              language=session.language))

        if error is not None or (result is not None and result.is_final):
            self._finish(session, error)

    def _finish(self, session: RecordingSession, error: Optional[Exception]) -> None:
        if session.capture_active:
            session.capture.stop_recording()
            session.capture_active = False
        session.remove_tap()
        self._session = None

        if error is not None:
            logger.info(f"Session {session.session_id} ended with recognition error: {error}")
        else:
            logger.info(f"Session {session.session_id} finished after {session.partial_count} partial results")

        self.display.start_label = START_LABEL
        self._refresh_start_control()
        self.publisher.publish_lifecycle(SessionEvent(
            session_id=session.session_id,
            event_type="error" if error is not None else "finished",
            metadata={"error": str(error)} if error is not None else {},
        ))

    def _cancel_lingering_session(self) -> None:
        session = self._session
        if session is None:
            return
        logger.info(f"Cancelling in-flight recognition for session {session.session_id}")
        session.remove_tap()
        session.channel.cancel()
        self._session = None
        self.publisher.publish_lifecycle(SessionEvent(session_id=session.session_id, event_type="cancelled"))

    def _refresh_start_control(self) -> None:
        self.display.start_enabled = self.authorized and self.available
