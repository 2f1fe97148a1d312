"""Main application entry point for Voice2Text."""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from .audio import AudioCapture
from .config import Voice2TextConfig
from .models.ui import DisplayState
from .recognition import GoogleStreamingRecognitionProvider, SessionPublisher
from .scanning import ImageFileScanner, TesseractOCRProvider
from .services import (
    ChannelAllocationError,
    LanguageSelector,
    MainThreadDispatcher,
    Notifier,
    RecordingSessionController,
    ScanLog,
    ScanToTextFlow,
    SpeechTrigger,
    load_language_options,
)
from .synthesis import Pyttsx3SynthesisProvider
from . import __version__

logger = logging.getLogger(__name__)


class Application:
    """Builds the providers and services from configuration and owns their lifetime."""

    def __init__(self, config_path: Optional[str] = None, log_level: Optional[str] = None):
        self.config = Voice2TextConfig(config_path)
        setup_logging(self.config, log_level or self.config.get('logging.level', 'INFO'))

        self.dispatcher = MainThreadDispatcher()
        self.display = DisplayState()
        self.notifier = Notifier(self.display)
        self.scan_log = ScanLog()

    def init(self) -> None:
        logger.info("Initializing services...")

        sample_rate = self.config.get('audio.sample_rate', 16000)
        chunk_size = self.config.get('audio.chunk_size', 1024)
        channels = self.config.get('audio.channels', 1)
        logger.info(f"Audio settings: {sample_rate}Hz, {chunk_size} samples/chunk, {channels} channels")

        def capture_factory(callback):
            return AudioCapture(
                callback=callback,
                sample_rate=sample_rate,
                chunk_size=chunk_size,
                channels=channels,
                input_device_index=self.config.get('audio.input_device_index'),
            )

        self.recognition_provider = GoogleStreamingRecognitionProvider(
            credentials_path=self.config.get_google_credentials_path(),
            sample_rate=sample_rate,
            use_enhanced=self.config.get('google_cloud.use_enhanced_model', True),
            enable_automatic_punctuation=self.config.get('google_cloud.enable_automatic_punctuation', True),
            model=self.config.get('google_cloud.model', 'latest_long'),
            unavailable_cooldown_seconds=self.config.get('google_cloud.unavailable_cooldown_seconds', 30),
        )
        self.session_controller = RecordingSessionController(
            provider=self.recognition_provider,
            capture_factory=capture_factory,
            dispatcher=self.dispatcher,
            display=self.display,
            notifier=self.notifier,
            publisher=SessionPublisher(),
        )
        self.language_selector = LanguageSelector(
            controller=self.session_controller,
            display=self.display,
            options=load_language_options(self.config.get('recognition.languages')),
            default=self.config.get('recognition.default_language', 'english'),
        )

        self.synthesis_provider = Pyttsx3SynthesisProvider(
            voice_id=self.config.get('synthesis.voice_id'),
            rate=self.config.get('synthesis.rate'),
            volume=self.config.get('synthesis.volume'),
        )
        self.speech_trigger = SpeechTrigger(self.synthesis_provider, self.display)

        self.scan_flow = ScanToTextFlow(
            scanner=ImageFileScanner(),
            ocr=TesseractOCRProvider(
                language=self.config.get('ocr.language', 'eng'),
                tesseract_cmd=self.config.get('ocr.tesseract_cmd'),
            ),
            scan_log=self.scan_log,
            display=self.display,
            notifier=self.notifier,
        )

        status = self.session_controller.check_authorization()
        logger.info(f"Speech recognition authorization: {status.value}")

    def cleanup(self) -> None:
        if hasattr(self, 'session_controller'):
            self.session_controller.shutdown()
        if hasattr(self, 'synthesis_provider'):
            self.synthesis_provider.cleanup()
        logger.info("Voice2Text shut down")


def setup_logging(config, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/voice2text.log')
    console_output = config.get('logging.console_output', False)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("Voice2Text application starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def main() -> None:
    """Main entry point for Voice2Text application."""
    parser = argparse.ArgumentParser(
        description="Voice2Text - speech to text, text to speech and document scanning",
        epilog="Keys: space=Start/stop recording, l=Language, s=Speak, c=Copy, o=Scan, q=Quit"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: looks for voice2text.yaml)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--auto",
        action="store_true",
        help="Run in automatic mode: record for the specified duration, print the final transcript and exit"
    )

    parser.add_argument(
        "--duration",
        type=int,
        default=10,
        help="Duration in seconds for auto mode recording (default: 10)"
    )

    parser.add_argument(
        "--language",
        type=str,
        help="Language key to recognize (english, hindi, french, or a configured key)"
    )

    parser.add_argument(
        "--scan",
        nargs="+",
        metavar="IMAGE",
        help="Recognize text in the given page images and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Voice2Text v{__version__}"
    )

    args = parser.parse_args()

    app = None
    try:
        app = Application(args.config, args.log_level)
        app.init()
        if args.language:
            app.language_selector.choose(args.language)

        if args.scan:
            from .auto_mode import run_scan_mode
            exit_code = run_scan_mode(app, args.scan)
        elif args.auto:
            from .auto_mode import run_auto_mode
            exit_code = run_auto_mode(app, args.duration)
        else:
            from .ui import VoiceToTextScreen
            VoiceToTextScreen(app).run()
            exit_code = 0
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        exit_code = 0
    except ChannelAllocationError as e:
        logger.critical(f"Fatal: {e}", exc_info=True)
        print(f"❌ Fatal error: {e}")
        exit_code = 1
    except Exception as e:
        print(f"❌ Error: {e}")
        logger.error(f"Application error: {e}", exc_info=True)
        exit_code = 1
    finally:
        if app is not None:
            app.cleanup()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
