"""Scan-to-text: page images through OCR into the scan log."""

import logging
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from ..models.scan import ScanOutcome, ScanRecord, ScanResult, ScanStatus
from ..models.ui import DisplayState
from ..scanning import AbstractDocumentScanner, AbstractOCRProvider, OCRError, ScannerError
from .notifications import Notifier

logger = logging.getLogger(__name__)


def join_page_text(pages: Sequence[str]) -> str:
    """Join per-page OCR output with newlines and trim surrounding whitespace."""
    return "\n".join(pages).strip()


class ScanLog:
    """Append-only, in-memory list of scan records."""

    def __init__(self):
        self._records: List[ScanRecord] = []

    def append(self, content: str) -> ScanRecord:
        record = ScanRecord(content=content)
        self._records.append(record)
        return record

    @property
    def records(self) -> Tuple[ScanRecord, ...]:
        return tuple(self._records)

    @property
    def latest(self) -> Optional[ScanRecord]:
        return self._records[-1] if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ScanRecord]:
        return iter(tuple(self._records))


class ScanState(Enum):
    CLOSED = "closed"
    SCANNING = "scanning"
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ScanToTextFlow:
    """Closed -> Scanning -> (Success | Cancelled | Failed) -> Closed."""

    def __init__(self,
                 scanner: AbstractDocumentScanner,
                 ocr: AbstractOCRProvider,
                 scan_log: ScanLog,
                 display: DisplayState,
                 notifier: Notifier):
        self.scanner = scanner
        self.ocr = ocr
        self.scan_log = scan_log
        self.display = display
        self.notifier = notifier
        self.state = ScanState.CLOSED

    def scan(self, source: Any) -> ScanResult:
        """Open the scanner on ``source`` and process whatever it returns."""
        if self.state is not ScanState.CLOSED:
            raise ScannerError("Scanner is already open")

        self._enter(ScanState.SCANNING)
        try:
            try:
                outcome = self.scanner.scan(source)
            except ScannerError as e:
                outcome = ScanOutcome.failed(e)
            return self.handle_outcome(outcome)
        finally:
            self._enter(ScanState.CLOSED)

    def handle_outcome(self, outcome: ScanOutcome) -> ScanResult:
        try:
            if outcome.status is ScanStatus.CANCELLED:
                self._enter(ScanState.CANCELLED)
                return ScanResult.CANCELLED

            if outcome.status is ScanStatus.FAILED:
                self._enter(ScanState.FAILED)
                logger.error(f"Document scan failed: {outcome.error}")
                self.notifier.alert("Scan Failed", f"the document could not be scanned: {outcome.error}")
                return ScanResult.FAILED

            self._enter(ScanState.SUCCESS)
            try:
                page_texts = [self.ocr.recognize_text(page) for page in outcome.pages]
            except OCRError as e:
                self._enter(ScanState.FAILED)
                logger.error(f"Text recognition failed: {e}")
                self.notifier.alert("Scan Failed", f"text recognition failed: {e}")
                return ScanResult.FAILED

            content = join_page_text(page_texts)
            if not content:
                self.notifier.notice("Empty Page", "no text is recognised from the image")
                return ScanResult.EMPTY

            record = self.scan_log.append(content)
            logger.info(f"Recorded scan {record.id} ({len(outcome.pages)} page(s), {len(content)} characters)")
            self.display.show_text(record.content)
            return ScanResult.RECORDED
        finally:
            self._enter(ScanState.CLOSED)

    def _enter(self, state: ScanState) -> None:
        if state is self.state:
            return
        logger.debug(f"Scan flow: {self.state.value} -> {state.value}")
        self.state = state
