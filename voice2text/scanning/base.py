"""Abstract base classes for document scanners and OCR providers."""

from abc import ABC, abstractmethod
from typing import Any

from ..models.scan import ScanOutcome


class ScannerError(RuntimeError):
    """The scanner could not capture the requested pages."""


class OCRError(RuntimeError):
    """The OCR provider failed to read a page."""


class AbstractDocumentScanner(ABC):
    """Captures page images and reports how the scan ended."""

    @abstractmethod
    def scan(self, source: Any) -> ScanOutcome:
        """Capture pages from ``source``.

        Returns:
            ScanOutcome with SUCCESS and the page images, CANCELLED, or FAILED with the error
        """
        pass


class AbstractOCRProvider(ABC):
    """Converts a captured page image into text."""

    @abstractmethod
    def recognize_text(self, image: Any) -> str:
        """Return the text found on one page. Raises OCRError on failure."""
        pass
