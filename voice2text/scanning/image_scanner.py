"""Document scanner that reads page images from files."""

import logging
from pathlib import Path
from typing import List, Sequence, Union

from PIL import Image, UnidentifiedImageError

from .base import AbstractDocumentScanner, ScannerError
from ..models.scan import ScanOutcome

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}


class ImageFileScanner(AbstractDocumentScanner):
    """Loads each page of a scan from an image file.

    A directory contributes its image files in name order. An empty
    selection means the user closed the scanner without scanning.
    """

    def scan(self, source: Sequence[Union[str, Path]]) -> ScanOutcome:
        paths = [Path(p) for p in (source or []) if str(p).strip()]
        if not paths:
            logger.info("Scanner closed without a selection")
            return ScanOutcome.cancelled()

        try:
            pages = [self._load_page(path) for path in self._expand(paths)]
        except ScannerError as e:
            logger.error(f"Document scanner failed: {e}")
            return ScanOutcome.failed(e)

        if not pages:
            return ScanOutcome.failed(ScannerError("No page images found in the selection"))

        logger.info(f"Scanned {len(pages)} page(s)")
        return ScanOutcome.success(pages)

    @staticmethod
    def _expand(paths: List[Path]) -> List[Path]:
        expanded = []
        for path in paths:
            try:
                if path.is_dir():
                    expanded.extend(sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES))
                else:
                    expanded.append(path)
            except OSError as e:
                raise ScannerError(f"Cannot read folder {path}: {e}") from e
        return expanded

    @staticmethod
    def _load_page(path: Path) -> Image.Image:
        try:
            image = Image.open(path)
            image.load()
        except FileNotFoundError as e:
            raise ScannerError(f"Page image not found: {path}") from e
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ScannerError(f"Cannot read page image {path}: {e}") from e
        logger.debug(f"Loaded page {path} ({image.size[0]}x{image.size[1]})")
        return image
