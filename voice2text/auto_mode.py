"""Non-interactive modes: timed recording and one-shot document scans."""

import time
import logging
from typing import List, TYPE_CHECKING

from .models.scan import ScanResult

if TYPE_CHECKING:
    from .main import Application

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.1


def run_auto_mode(app: "Application", duration_seconds: int = 10) -> int:
    """Record for ``duration_seconds``, stop, wait for the final transcript and print it.

    This mode:
    1. Verifies recognition is authorized
    2. Starts a recording session
    3. Pumps the main-context dispatcher while recording
    4. Stops and waits for the session to finish
    5. Prints the transcript

    Returns:
        Process exit code
    """
    controller = app.session_controller
    logger.info(f"🤖 Starting auto mode: {duration_seconds}s recording")

    if not controller.authorized:
        print("❌ Speech recognition is not authorized - check google_cloud.credentials_path")
        return 1

    print(f"🎙️  Recording for {duration_seconds}s ({app.language_selector.current.name})...")
    if not controller.start():
        _print_notices(app)
        return 1

    deadline = time.time() + duration_seconds
    while time.time() < deadline and controller.is_active:
        app.dispatcher.run_pending(timeout=POLL_INTERVAL_SECONDS)

    if controller.is_capturing:
        controller.stop()
        print("⏹️  Stopped, waiting for the final transcript...")

    stats = controller.capture_stats()
    if stats is not None:
        print("📊 Recording stats:")
        print(f"   Duration: {stats.duration_seconds:.1f}s")
        print(f"   Chunks: {stats.total_chunks}")
        print(f"   Peak level: {stats.peak_level:.3f}")

    while controller.is_active:
        app.dispatcher.run_pending(timeout=POLL_INTERVAL_SECONDS)
    app.dispatcher.run_pending()

    print("📄 TRANSCRIPT:")
    print("-" * 40)
    print(app.display.text)
    print("-" * 40)
    logger.info("Auto mode completed")
    return 0


def run_scan_mode(app: "Application", image_paths: List[str]) -> int:
    """Run the scan-to-text flow over ``image_paths`` and print the outcome."""
    result = app.scan_flow.scan(image_paths)
    if result is ScanResult.RECORDED:
        record = app.scan_log.latest
        print(f"📄 Scan {record.id}:")
        print("-" * 40)
        print(record.content)
        print("-" * 40)
        return 0

    _print_notices(app)
    return 0 if result in (ScanResult.EMPTY, ScanResult.CANCELLED) else 1


def _print_notices(app: "Application") -> None:
    for notice in app.display.notices:
        icon = "❌" if notice.level == "alert" else "ℹ️ "
        print(f"{icon} {notice.title}: {notice.message}")
