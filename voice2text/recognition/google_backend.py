"""Google Speech-to-Text streaming recognition provider."""

import queue
import logging
import threading
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from .base import AbstractRecognitionProvider, RecognitionChannel, RecognitionError, ResultCallback
from ..models.transcription import AuthorizationStatus, RecognitionResult

from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.auth import exceptions as auth_exceptions
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

DEFAULT_UNAVAILABLE_COOLDOWN_SECONDS = 30.0


class GoogleRecognitionChannel(RecognitionChannel):
    """One streaming_recognize call fed from a queue of audio chunks.

    Finalized segments are accumulated so every delivery carries the whole
    transcript so far. The final delivery is made when the response stream
    ends, which happens after end_audio().
    """

    def __init__(self,
                 client: speech.SpeechClient,
                 streaming_config: speech.StreamingRecognitionConfig,
                 language: str,
                 callback: ResultCallback,
                 on_unavailable: Optional[Callable[[], None]] = None):
        self.client = client
        self.streaming_config = streaming_config
        self.language = language
        self.callback = callback
        self.on_unavailable = on_unavailable

        self._audio_queue: "queue.Queue[Optional[bytes]]" = queue.Queue()
        self._audio_ended = threading.Event()
        self._cancelled = threading.Event()
        self._finalized: List[str] = []
        self._interim = ""
        self._thread: Optional[threading.Thread] = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.name = f"RecognitionChannel-{self.language}"
        self._thread.start()

    def append(self, audio_chunk: bytes) -> None:
        if self._audio_ended.is_set() or not audio_chunk:
            return
        self._audio_queue.put(audio_chunk)

    def end_audio(self) -> None:
        if self._audio_ended.is_set():
            return
        logger.debug("End of audio for %s channel", self.language)
        self._audio_ended.set()
        self._audio_queue.put(None)

    def cancel(self) -> None:
        logger.info("Cancelling %s recognition channel", self.language)
        self._cancelled.set()
        self.end_audio()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def transcript(self) -> str:
        parts = self._finalized + ([self._interim] if self._interim else [])
        return " ".join(part for part in parts if part)

    def _requests(self) -> Iterator[speech.StreamingRecognizeRequest]:
        while True:
            chunk = self._audio_queue.get()
            if chunk is None or self._cancelled.is_set():
                return
            yield speech.StreamingRecognizeRequest(audio_content=chunk)

    def _consume(self, response: speech.StreamingRecognizeResponse) -> bool:
        """Fold one response into the transcript. Returns True if the text changed."""
        before = self.transcript()
        interim_parts = []
        for result in response.results:
            if not result.alternatives:
                continue
            text = result.alternatives[0].transcript.strip()
            if result.is_final:
                self._finalized.append(text)
                self._interim = ""
            else:
                interim_parts.append(text)
        if interim_parts:
            self._interim = " ".join(interim_parts)
        return self.transcript() != before

    def _deliver(self, result: Optional[RecognitionResult], error: Optional[Exception]) -> None:
        if self._cancelled.is_set():
            logger.debug("Dropping delivery for cancelled %s channel", self.language)
            return
        self.callback(result, error)

    def _run(self) -> None:
        """Response reader loop, runs on the channel thread."""
        try:
            responses = self.client.streaming_recognize(
                config=self.streaming_config,
                requests=self._requests(),
            )
            for response in responses:
                if self._cancelled.is_set():
                    return
                if response.error and response.error.code:
                    raise RecognitionError(f"Google Speech stream error: {response.error.message}")
                if self._consume(response):
                    self._deliver(RecognitionResult(text=self.transcript(),
                                                    is_final=False,
                                                    language=self.language), None)
        except gax_exceptions.GoogleAPICallError as e:
            logger.error("Google STT streaming call failed for %s: %s", self.language, e)
            if isinstance(e, gax_exceptions.ServiceUnavailable) and self.on_unavailable is not None:
                self.on_unavailable()
            self._deliver(None, RecognitionError(f"Google Speech API error: {e}"))
            return
        except RecognitionError as e:
            logger.error("%s", e)
            self._deliver(None, e)
            return

        logger.info(f"✅ Final transcript ({self.language}): '{self.transcript()}'")
        self._deliver(RecognitionResult(text=self.transcript(), is_final=True, language=self.language), None)


class GoogleStreamingRecognitionProvider(AbstractRecognitionProvider):
    """Google Speech-to-Text streaming API provider."""

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 sample_rate: int = 16000,
                 use_enhanced: bool = True,
                 enable_automatic_punctuation: bool = True,
                 model: Optional[str] = "latest_long",
                 client: Optional[speech.SpeechClient] = None,
                 unavailable_cooldown_seconds: float = DEFAULT_UNAVAILABLE_COOLDOWN_SECONDS):
        """Initialize Google streaming provider.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            sample_rate: Sample rate of the captured LINEAR16 audio
            use_enhanced: Whether to use enhanced model (costs more but better quality)
            enable_automatic_punctuation: Enable automatic punctuation
            model: Recognition model name
            client: Pre-built SpeechClient; skips credential loading
            unavailable_cooldown_seconds: How long the service is reported unavailable
                after it answers UNAVAILABLE
        """
        self.credentials_path = credentials_path
        self.sample_rate = sample_rate
        self.use_enhanced = use_enhanced
        self.enable_automatic_punctuation = enable_automatic_punctuation
        self.model = model
        self.client = client
        self.project_id = None
        self.service_name = "Google Speech-to-Text"
        self.unavailable_cooldown_seconds = unavailable_cooldown_seconds
        self.available = True
        self._availability_lock = threading.Lock()
        self._recovery_timer: Optional[threading.Timer] = None

    def request_authorization(self) -> AuthorizationStatus:
        """Load service account credentials and build the client."""
        if self.client is not None:
            return AuthorizationStatus.AUTHORIZED

        if not self.credentials_path:
            logger.warning("Speech recognition not yet authorized: no Google credentials configured")
            return AuthorizationStatus.NOT_DETERMINED

        if not Path(self.credentials_path).exists():
            logger.warning(f"User denied access to speech recognition: credentials file not found: {self.credentials_path}")
            return AuthorizationStatus.DENIED

        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        try:
            credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        except (ValueError, auth_exceptions.GoogleAuthError) as e:
            logger.warning(f"Speech recognition restricted: invalid Google credentials: {e}")
            return AuthorizationStatus.RESTRICTED

        self.client = speech.SpeechClient(credentials=credentials)
        self.project_id = credentials.project_id
        logger.info(f"Using Google Cloud project: {self.project_id}")
        return AuthorizationStatus.AUTHORIZED

    def build_streaming_config(self, language: str) -> speech.StreamingRecognitionConfig:
        recognition_config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self.sample_rate,
            language_code=language,
            use_enhanced=self.use_enhanced,
            enable_automatic_punctuation=self.enable_automatic_punctuation,
            model=self.model or "",
        )
        return speech.StreamingRecognitionConfig(
            config=recognition_config,
            interim_results=True,
        )

    def open_channel(self, language: str, callback: ResultCallback) -> Optional[GoogleRecognitionChannel]:
        if self.client is None:
            logger.error("Cannot open recognition channel: Google Speech client not initialized")
            return None

        logger.debug(f"Opening channel: language={language}, enhanced={self.use_enhanced}, "
                     f"punctuation={self.enable_automatic_punctuation}, model={self.model}")
        channel = GoogleRecognitionChannel(
            client=self.client,
            streaming_config=self.build_streaming_config(language),
            language=language,
            callback=callback,
            on_unavailable=self._mark_unavailable,
        )
        channel.start()
        return channel

    def _mark_unavailable(self) -> None:
        """The service answered UNAVAILABLE: report it, then recover after the cooldown."""
        with self._availability_lock:
            if self._recovery_timer is not None:
                self._recovery_timer.cancel()
            self._recovery_timer = threading.Timer(self.unavailable_cooldown_seconds, self._mark_available)
            self._recovery_timer.daemon = True
            self._recovery_timer.start()
            changed = self.available
            self.available = False
        if changed:
            logger.warning(f"{self.service_name} unavailable, retrying in {self.unavailable_cooldown_seconds:.0f}s")
            self.notify_availability(False)

    def _mark_available(self) -> None:
        with self._availability_lock:
            self._recovery_timer = None
            changed = not self.available
            self.available = True
        if changed:
            logger.info(f"{self.service_name} available again")
            self.notify_availability(True)

    def cleanup(self) -> None:
        with self._availability_lock:
            if self._recovery_timer is not None:
                self._recovery_timer.cancel()
                self._recovery_timer = None
