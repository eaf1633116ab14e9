"""Events emitted by the scrape pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .record import ScrapedRecord


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ReconcileOutcome(str, Enum):
    NEW = "new"
    DUPLICATE = "duplicate"
    UPDATED = "updated"


@dataclass
class ReconcileResult:
    """Decision for one candidate record; `matched` is the existing record, if any."""

    outcome: ReconcileOutcome
    matched: Optional[ScrapedRecord] = None


@dataclass
class ProgressEvent:
    severity: Severity
    message: str


@dataclass
class ItemEvent:
    """
    Per-card outcome.

    `record` is the freshly scraped record for NEW outcomes and None otherwise;
    `matched_record` is the existing record for DUPLICATE and UPDATED outcomes.
    """

    record: Optional[ScrapedRecord]
    outcome: ReconcileOutcome
    matched_record: Optional[ScrapedRecord] = None


ProgressCallback = Callable[[ProgressEvent], None]
ItemCallback = Callable[[ItemEvent], None]
