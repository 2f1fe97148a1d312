"""Document scanning and OCR for Voice2Text."""

from .base import AbstractDocumentScanner, AbstractOCRProvider, OCRError, ScannerError
from .image_scanner import ImageFileScanner
from .tesseract_ocr import TesseractOCRProvider

__all__ = [
    "AbstractDocumentScanner",
    "AbstractOCRProvider",
    "OCRError",
    "ScannerError",
    "ImageFileScanner",
    "TesseractOCRProvider",
]
