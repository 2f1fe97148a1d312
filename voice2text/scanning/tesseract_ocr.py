"""OCR provider backed by Tesseract through ``pytesseract``."""

import os
import logging
from typing import Optional

import pytesseract
from PIL import Image

from .base import AbstractOCRProvider, OCRError

logger = logging.getLogger(__name__)


class TesseractOCRProvider(AbstractOCRProvider):
    """Runs Tesseract over one page image at a time."""

    def __init__(self, language: str = "eng", tesseract_cmd: Optional[str] = None, config: str = ""):
        """Initialize the OCR provider.

        Args:
            language: Tesseract language pack(s), e.g. 'eng' or 'eng+fra'
            tesseract_cmd: Path to the tesseract binary; falls back to the
                           TESSERACT_CMD environment variable, then PATH
            config: Extra command line options for tesseract
        """
        self.language = language
        self.config = config
        tesseract_cmd = tesseract_cmd or os.environ.get("TESSERACT_CMD")
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize_text(self, image: Image.Image) -> str:
        try:
            text = pytesseract.image_to_string(image, lang=self.language, config=self.config)
        except pytesseract.TesseractNotFoundError as e:
            raise OCRError("Tesseract is not installed or not on PATH") from e
        except (pytesseract.TesseractError, RuntimeError) as e:
            raise OCRError(f"Text recognition failed: {e}") from e
        logger.debug(f"OCR read {len(text)} characters")
        return text
