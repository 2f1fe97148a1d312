"""Text-to-speech provider powered by ``pyttsx3``."""

import logging
import threading
from typing import Optional

import pyttsx3

from .base import AbstractSynthesisProvider

logger = logging.getLogger(__name__)

# How long stop() waits for the interrupted run loop to return.
STOP_JOIN_TIMEOUT_SECONDS = 1.0


class Pyttsx3SynthesisProvider(AbstractSynthesisProvider):
    """Local speaker playback using a pyttsx3 engine.

    ``runAndWait`` blocks, so each utterance runs on a worker thread and
    ``stop()`` interrupts it from the caller's thread. The speaking flag
    belongs to the current utterance only: a worker that outlives stop()
    never clears the flag of the utterance started after it.
    """

    def __init__(self, voice_id: Optional[str] = None, rate: Optional[int] = None, volume: Optional[float] = None):
        self._engine = pyttsx3.init()
        if voice_id:
            self._engine.setProperty("voice", voice_id)
        if rate is not None:
            self._engine.setProperty("rate", rate)
        if volume is not None:
            self._engine.setProperty("volume", max(0.0, min(1.0, volume)))

        self._lock = threading.Lock()
        self._speaking = threading.Event()
        self._utterance: Optional[object] = None
        self._worker: Optional[threading.Thread] = None
        logger.info("pyttsx3 synthesis provider ready")

    @property
    def is_speaking(self) -> bool:
        return self._speaking.is_set()

    def speak(self, text: str) -> None:
        if self.is_speaking:
            logger.warning("Utterance already in progress, ignoring speak request")
            return
        # The engine's run loop must not be entered twice.
        self._join_worker(STOP_JOIN_TIMEOUT_SECONDS)

        utterance = object()
        with self._lock:
            self._utterance = utterance
            self._speaking.set()
        self._worker = threading.Thread(target=self._run_utterance, args=(text, utterance), daemon=True)
        self._worker.name = "SynthesisThread"
        self._worker.start()

    def stop(self) -> None:
        if not self.is_speaking:
            return
        logger.info("Stopping speech immediately")
        self._engine.stop()
        with self._lock:
            self._utterance = None
            self._speaking.clear()
        self._join_worker(STOP_JOIN_TIMEOUT_SECONDS)

    def _run_utterance(self, text: str, utterance: object) -> None:
        logger.debug(f"Speaking {len(text)} characters")
        try:
            self._engine.say(text)
            self._engine.runAndWait()
        except RuntimeError as e:
            logger.error(f"Speech synthesis failed: {e}")
        finally:
            with self._lock:
                if self._utterance is utterance:
                    self._utterance = None
                    self._speaking.clear()

    def _join_worker(self, timeout: float) -> None:
        worker = self._worker
        if worker is None or worker is threading.current_thread():
            return
        worker.join(timeout)
        if worker.is_alive():
            logger.warning("Previous utterance is still draining")

    def cleanup(self) -> None:
        self.stop()
        self._join_worker(STOP_JOIN_TIMEOUT_SECONDS)
