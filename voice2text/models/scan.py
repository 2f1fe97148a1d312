"""Scan-to-text data models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional


@dataclass(frozen=True)
class ScanRecord:
    """Text recognized from one completed scan."""
    content: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=datetime.now)


class ScanStatus(Enum):
    """How the scanner was closed."""
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class ScanOutcome:
    """What a document scanner hands back when it closes."""
    status: ScanStatus
    pages: List[Any] = field(default_factory=list)  # page images
    error: Optional[Exception] = None

    @classmethod
    def success(cls, pages: List[Any]) -> "ScanOutcome":
        return cls(status=ScanStatus.SUCCESS, pages=list(pages))

    @classmethod
    def cancelled(cls) -> "ScanOutcome":
        return cls(status=ScanStatus.CANCELLED)

    @classmethod
    def failed(cls, error: Exception) -> "ScanOutcome":
        return cls(status=ScanStatus.FAILED, error=error)


class ScanResult(Enum):
    """What the scan-to-text flow did with an outcome."""
    RECORDED = "recorded"
    EMPTY = "empty"
    CANCELLED = "cancelled"
    FAILED = "failed"
